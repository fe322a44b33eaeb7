"""
RefreshToken model: one row per issued refresh token.
Fields:
- token: the opaque bearer value (unique, never reused)
- user_id (String(36)) - FK to users.id
- expires_at: fixed at creation
- revoked_at: null while active; set once, never cleared
Rows are kept after expiry/revocation so replayed values can still be recognised.
"""
import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base
from utils.clock import as_utc, utcnow


class TokenState(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(128), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        Index("ix_refresh_tokens_user_id_revoked_at", "user_id", "revoked_at"),
    )

    def state(self, now=None) -> TokenState:
        # revocation wins over expiry
        if self.revoked_at is not None:
            return TokenState.REVOKED
        if as_utc(self.expires_at) <= (as_utc(now) or utcnow()):
            return TokenState.EXPIRED
        return TokenState.ACTIVE

    def is_usable(self, now=None) -> bool:
        return self.state(now) is TokenState.ACTIVE

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id} revoked_at={self.revoked_at}>"
