"""Identity data model shared by the session store and the registries."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    CLIENT = "client"
    FREELANCER = "freelancer"


class Identity(BaseModel):
    """An authenticated user record (client or freelancer).

    Immutable: profile updates replace the record in the identity registry.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    display_name: str
    role: UserRole = UserRole.CLIENT
    is_public: bool = True
    hourly_rate_cents: Optional[int] = Field(default=None, ge=0)
    currency: str = "bdt"
    avatar_url: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    is_verified: bool = False

    @property
    def is_freelancer(self) -> bool:
        return self.role == UserRole.FREELANCER
