import enum

from models.base_model import Base, BaseModel, SoftDeleteMixin
from sqlalchemy import Boolean, Column, Enum, String
from sqlalchemy.orm import relationship


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(SoftDeleteMixin, BaseModel, Base):
    __tablename__ = "users"
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER)
    is_active = Column(Boolean, nullable=False, default=True)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        passive_deletes=True,
    )
