import pytest

from api import create_app
from api.config import (
    DEFAULT_JWT_SECRET,
    ConfigError,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    validate_config,
)


def _valid(**overrides):
    config = {
        "APP_ENV": "dev",
        "JWT_ENABLED": True,
        "JWT_SECRET": "s3cret",
        "JWT_EXPIRATION": "7d",
        "JWT_REFRESH_EXPIRATION": "30d",
        "DB_SLOW_QUERY_THRESHOLD_MS": 1000,
        "QUERY_METRICS_MAX_ENTRIES": 1000,
        "LOG_LEVEL": "INFO",
    }
    config.update(overrides)
    return config


@pytest.mark.parametrize(
    "name, expected",
    [
        ("testing", TestingConfig),
        ("test", TestingConfig),
        ("prod", ProductionConfig),
        ("production", ProductionConfig),
        ("dev", DevelopmentConfig),
        ("anything-else", DevelopmentConfig),
    ],
)
def test_get_config(name, expected):
    assert get_config(name) is expected


def test_get_config_falls_back_to_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_config(None) is ProductionConfig


def test_valid_config_passes():
    validate_config(_valid())


@pytest.mark.parametrize("key", ["JWT_EXPIRATION", "JWT_REFRESH_EXPIRATION"])
def test_malformed_durations_are_rejected(key):
    with pytest.raises(ConfigError) as exc:
        validate_config(_valid(**{key: "1 week"}))
    assert any(issue.startswith(key) for issue in exc.value.issues)


def test_missing_secret_is_rejected():
    with pytest.raises(ConfigError):
        validate_config(_valid(JWT_SECRET=""))


def test_missing_secret_is_fine_when_jwt_disabled():
    validate_config(_valid(JWT_SECRET="", JWT_ENABLED=False))


def test_default_secret_is_refused_in_production():
    validate_config(_valid(JWT_SECRET=DEFAULT_JWT_SECRET))
    with pytest.raises(ConfigError):
        validate_config(_valid(JWT_SECRET=DEFAULT_JWT_SECRET, APP_ENV="production"))


def test_every_issue_is_reported_at_once():
    with pytest.raises(ConfigError) as exc:
        validate_config(_valid(LOG_LEVEL="LOUD", QUERY_METRICS_MAX_ENTRIES=0, DB_SLOW_QUERY_THRESHOLD_MS=-5))
    assert len(exc.value.issues) == 3


def test_create_app_refuses_bad_config(monkeypatch):
    monkeypatch.setattr(TestingConfig, "JWT_REFRESH_EXPIRATION", "thirty days")
    with pytest.raises(ConfigError):
        create_app("testing")


def test_durations_too_long_for_a_datetime_are_rejected():
    with pytest.raises(ConfigError) as exc:
        validate_config(_valid(JWT_REFRESH_EXPIRATION="999999999d"))
    assert exc.value.issues[0].startswith("JWT_REFRESH_EXPIRATION")


@pytest.mark.parametrize("key", ["THROTTLE_TTL", "THROTTLE_LIMIT"])
@pytest.mark.parametrize("value", [0, -1, "ten"])
def test_throttle_settings_must_be_positive_integers(key, value):
    with pytest.raises(ConfigError) as exc:
        validate_config(_valid(**{key: value}))
    assert exc.value.issues == [f"{key}: expected an integer >= 1, got {value!r}"]
