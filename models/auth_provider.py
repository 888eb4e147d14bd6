from enum import Enum

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import Base, BaseModel


class Provider(str, Enum):
    GOOGLE = "google"
    FACEBOOK = "facebook"
    GITHUB = "github"


PROVIDER_VALUES = [p.value for p in Provider]


class AuthProvider(BaseModel, Base):
    """An external identity linked to a local account."""
    __tablename__ = "auth_providers"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider = Column(SAEnum(*PROVIDER_VALUES, name="auth_provider", native_enum=False), nullable=False)
    provider_id = Column(String(255), nullable=False)

    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_auth_providers_identity"),
    )
