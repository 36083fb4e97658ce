from enum import Enum

from sqlalchemy import Column, String, Integer
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel


class Role(str, Enum):
    """Roles the API recognises. Anything else in a token is not a role."""
    ADMIN = "admin"

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            return None


class AdminUser(BaseModel, Base):
    __tablename__ = "admin_users"

    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SAEnum(Role, values_callable=lambda e: [m.value for m in e], native_enum=False),
                  nullable=False, default=Role.ADMIN)
    # 1 for the account created by the bootstrap ceremony, NULL otherwise.
    # The unique constraint lets at most one bootstrap insert ever commit.
    bootstrap_slot = Column(Integer, nullable=True, unique=True)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")
