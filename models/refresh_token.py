"""
RefreshToken model: one row per outstanding refresh token.
Fields:
- token (unique) - the signed token string handed to the client
- jti - random id embedded in the token's claims
- user_id (String(36)) - FK to users.id
- expires_at
A row is consumed (deleted) by a successful rotation or by logout.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(512), nullable=False, unique=True, index=True)
    jti = Column(String(64), nullable=False, unique=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<RefreshToken jti={self.jti} user={self.user_id}>"
