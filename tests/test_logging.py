import logging

from api.logging_config import CleanFormatter, setup_logging


def _record(msg, **extra):
    record = logging.LogRecord("api.requests", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_prefixes_request_id():
    line = CleanFormatter().format(_record("Response: GET /x - 200", request_id="abc-123"))

    assert "[INFO    ]" in line
    assert line.endswith("| [abc-123] Response: GET /x - 200")


def test_formatter_without_request_id():
    assert CleanFormatter().format(_record("hello")).endswith("| hello")


def test_setup_logging_replaces_its_own_handler():
    root = logging.getLogger()
    before = [h for h in root.handlers if getattr(h, "_starter_api", False)]

    setup_logging("DEBUG")
    setup_logging("WARNING")

    ours = [h for h in root.handlers if getattr(h, "_starter_api", False)]
    assert len(ours) == 1
    assert ours[0] not in before
    assert root.level == logging.WARNING


def test_requests_are_logged_with_their_id(client, caplog):
    with caplog.at_level(logging.INFO, logger="api.requests"):
        client.get("/api/v1/health", headers={"X-Request-Id": "trace-1"})

    records = [r for r in caplog.records if r.name == "api.requests"]
    assert [r.getMessage().split(":")[0] for r in records] == ["Incoming Request", "Response"]
    assert all(r.request_id == "trace-1" for r in records)
