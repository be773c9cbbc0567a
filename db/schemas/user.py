from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from db.schemas.skill import SkillResponse


class UserProfileUpdate(BaseModel):
    name: str = Field(..., max_length=255)
    bio: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("The name field is required.")
        return value


class UserSkillsUpdate(BaseModel):
    skill_ids: List[int]


class UserResponse(BaseModel):
    id: int
    name: Optional[str] = None
    phone_number: str
    bio: Optional[str] = None
    profile_picture_path: Optional[str] = None
    phone_verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    skills: List[SkillResponse] = []
    followers_count: int = 0
    following_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class PublicUserResponse(UserResponse):
    is_followed_by_current_user: bool = False


class FollowUserSummary(BaseModel):
    id: int
    name: Optional[str] = None
    profile_picture_path: Optional[str] = None
    skills: List[SkillResponse] = []
    is_followed_by_current_user: bool

    model_config = ConfigDict(from_attributes=True)
