# Auth schemas
from db.schemas.auth import OtpRequest, OtpLogin, OtpRequestResponse

# Skill schemas
from db.schemas.skill import SkillResponse

# User schemas
from db.schemas.user import (
    UserProfileUpdate, UserSkillsUpdate, UserResponse,
    PublicUserResponse, FollowUserSummary
)

__all__ = [
    # Auth
    "OtpRequest", "OtpLogin", "OtpRequestResponse",

    # Skill
    "SkillResponse",

    # User
    "UserProfileUpdate", "UserSkillsUpdate", "UserResponse",
    "PublicUserResponse", "FollowUserSummary",
]
