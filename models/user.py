from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Text

from utils.security import (
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
)


class User(BaseModel, Base):
    __tablename__ = "users"
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    # the single refresh token currently allowed for this user (None when logged out)
    refresh_token = Column(Text, nullable=True)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    @password.setter
    def password(self, plain: str):
        self.password_hash = hash_password(plain)

    def verify_password(self, plain: str) -> bool:
        return verify_password(plain, self.password_hash)

    def generate_access_token(self) -> str:
        return create_access_token(self.id)

    def generate_refresh_token(self) -> str:
        return create_refresh_token(self.id)

    def __repr__(self):
        return f"<User id={self.id} email={self.email}>"
