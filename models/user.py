from models.base_model import Base, BaseModel
from sqlalchemy import Column, String


class User(BaseModel, Base):
    __tablename__ = "users"

    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    def __repr__(self):
        return f"<User {self.username}>"
