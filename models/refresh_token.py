"""
RefreshToken model: one row per issued refresh token.
Fields:
- user_id (String(36)) - FK to admin_users.id
- token_hash - argon2 hash of the opaque token; the raw token is never stored
- expires_at (naive UTC), created_at
Rows are deleted when the token is redeemed (rotation) or revoked.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "auth_refresh_tokens"

    user_id = Column(String(36), ForeignKey("admin_users.id", ondelete="CASCADE"),
                     nullable=False, index=True)
    token_hash = Column(String(255), nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    user = relationship("AdminUser", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id}>"
