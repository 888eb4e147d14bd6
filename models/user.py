from enum import Enum

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.types import Enum as SAEnum

from models.base_model import Base, BaseModel


class UserRole(str, Enum):
    ADMIN = "admin"
    TRAINER = "trainer"
    LEARNER = "learner"


ROLE_VALUES = [r.value for r in UserRole]


class User(BaseModel, Base):
    __tablename__ = "users"
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        SAEnum(*ROLE_VALUES, name="user_role", native_enum=False),
        nullable=False,
        default=UserRole.LEARNER.value,
    )
    bio = Column(String(500), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    # JSON-encoded list, stored as text
    certifications = Column(Text, nullable=True)
    # One-time password reset code
    otp = Column(Integer, nullable=True)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
