from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, exists, or_, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from db.models import User, Follow, Skill
from db.schemas import UserProfileUpdate, UserResponse, PublicUserResponse, FollowUserSummary
from utils import app_logger

logger = app_logger.createLogger("app")


class UserService:

    @staticmethod
    def get_user_by_id(user_id: int, db: Session) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_phone_number(phone_number: str, db: Session) -> Optional[User]:
        return db.query(User).filter(User.phone_number == phone_number).first()

    @staticmethod
    def get_or_create_user_by_phone_number(phone_number: str, db: Session, verified_at: Optional[datetime] = None,
                                           commit: bool = True) -> User:
        """
            Finds the user owning a normalized phone number or creates a minimal one.
            A concurrent insert for the same number is resolved by re-reading after
            the unique constraint fires, so a phone never maps to two users.
            With commit=False changes are flushed into the caller's transaction and
            a unique constraint violation is left to the caller.
        """
        user = UserService.get_user_by_phone_number(phone_number=phone_number, db=db)
        if not user:
            try:
                user = User(phone_number=phone_number, phone_verified_at=verified_at)
                db.add(user)
                if commit:
                    db.commit()
                else:
                    db.flush()
                logger.info(f"Created user for {phone_number}")
            except IntegrityError:
                if not commit:
                    raise
                db.rollback()
                user = UserService.get_user_by_phone_number(phone_number=phone_number, db=db)
                if not user:
                    raise
        elif user.phone_verified_at is None and verified_at is not None:
            user.phone_verified_at = verified_at
            if commit:
                db.commit()
            else:
                db.flush()
        db.refresh(user)
        return user

    @staticmethod
    def get_follow_counts(user_id: int, db: Session):
        followers_count = db.query(func.count(Follow.id)).filter(Follow.following_id == user_id).scalar()
        following_count = db.query(func.count(Follow.id)).filter(Follow.follower_id == user_id).scalar()
        return followers_count or 0, following_count or 0

    @staticmethod
    def build_profile(user: User, db: Session) -> UserResponse:
        followers_count, following_count = UserService.get_follow_counts(user_id=user.id, db=db)
        profile = UserResponse.model_validate(user)
        profile.followers_count = followers_count
        profile.following_count = following_count
        return profile

    @staticmethod
    def build_public_profile(user: User, viewer: User, db: Session) -> PublicUserResponse:
        from services.follow_service import FollowService

        profile = UserService.build_profile(user=user, db=db)
        return PublicUserResponse(
            **profile.model_dump(),
            is_followed_by_current_user=FollowService.is_following(
                follower_id=viewer.id, following_id=user.id, db=db
            ),
        )

    @staticmethod
    def update_user_data(user: User, user_profile_data: UserProfileUpdate, db: Session) -> User:
        for key, value in user_profile_data.model_dump(exclude_unset=True).items():
            setattr(user, key, value)
        db.commit()
        db.refresh(user)
        logger.info(f"User {user.id} updated profile info.")
        return user

    @staticmethod
    def find_missing_skill_ids(skill_ids: List[int], db: Session) -> List[int]:
        if not skill_ids:
            return []
        existing = {skill_id for (skill_id,) in db.query(Skill.id).filter(Skill.id.in_(set(skill_ids))).all()}
        return [skill_id for skill_id in skill_ids if skill_id not in existing]

    @staticmethod
    def sync_skills(user: User, skill_ids: List[int], db: Session) -> User:
        """Replaces the user's skills with exactly the given set"""
        skills = db.query(Skill).filter(Skill.id.in_(set(skill_ids))).all() if skill_ids else []
        user.skills = skills
        db.commit()
        db.refresh(user)
        logger.info(f"User {user.id} updated skills.")
        return user

    @staticmethod
    def search_users(term: str, viewer: User, db: Session, page: int = 1, per_page: int = 15) -> dict:
        """
            Case-insensitive substring search over user names and skill names.
            The viewer is never part of the result. An empty term matches nobody.
        """
        from services.follow_service import FollowService

        term = (term or "").strip()
        if not term:
            logger.info("Search attempted with empty query term.")
            per_page = FollowService.clamp_per_page(per_page)
            return {"data": [], "current_page": max(page, 1), "per_page": per_page, "total": 0, "last_page": 1}

        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        followed = exists().where(and_(Follow.follower_id == viewer.id, Follow.following_id == User.id))
        query = (
            db.query(User, followed.correlate(User).label("is_followed_by_current_user"))
            .filter(
                User.id != viewer.id,
                or_(
                    User.name.ilike(pattern, escape="\\"),
                    User.skills.any(Skill.name.ilike(pattern, escape="\\")),
                ),
            )
            .options(selectinload(User.skills))
            .order_by(User.id)
        )
        rows, meta = FollowService._paginate(query, page=page, per_page=per_page)
        logger.info(f"Search for '{term}' by User {viewer.id} found {meta['total']} results.")
        data = [
            FollowUserSummary(
                id=user.id,
                name=user.name,
                profile_picture_path=user.profile_picture_path,
                skills=user.skills,
                is_followed_by_current_user=bool(is_followed),
            ).model_dump(mode="json")
            for user, is_followed in rows
        ]
        return {"data": data, **meta}
