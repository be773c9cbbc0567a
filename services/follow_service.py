import math
from typing import List

from sqlalchemy import exists, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload, aliased

from db.models import User, Follow
from db.schemas import FollowUserSummary
from utils import app_logger

logger = app_logger.createLogger("app")

DEFAULT_PER_PAGE = 15
MAX_PER_PAGE = 100


class AlreadyFollowing(Exception):
    pass


class FollowService:

    @staticmethod
    def is_following(follower_id: int, following_id: int, db: Session) -> bool:
        return db.query(
            exists().where(Follow.follower_id == follower_id, Follow.following_id == following_id)
        ).scalar()

    @staticmethod
    def follow(follower: User, following: User, db: Session) -> Follow:
        if FollowService.is_following(follower_id=follower.id, following_id=following.id, db=db):
            raise AlreadyFollowing()
        try:
            follow = Follow(follower_id=follower.id, following_id=following.id)
            db.add(follow)
            db.commit()
        except IntegrityError:
            # lost a race against an identical follow request
            db.rollback()
            raise AlreadyFollowing()
        logger.info(f"User {follower.id} followed User {following.id}")
        return follow

    @staticmethod
    def unfollow(follower: User, following: User, db: Session) -> bool:
        deleted = db.query(Follow).filter(
            Follow.follower_id == follower.id,
            Follow.following_id == following.id
        ).delete(synchronize_session=False)
        db.commit()
        if deleted:
            logger.info(f"User {follower.id} unfollowed User {following.id}")
        else:
            logger.warning(f"User {follower.id} attempted to unfollow User {following.id}, but was not following.")
        return bool(deleted)

    @staticmethod
    def get_following_ids(user_id: int, db: Session) -> List[int]:
        rows = db.query(Follow.following_id).filter(Follow.follower_id == user_id).order_by(Follow.id).all()
        return [following_id for (following_id,) in rows]

    @staticmethod
    def clamp_per_page(per_page: int) -> int:
        return max(1, min(per_page, MAX_PER_PAGE))

    @staticmethod
    def _paginate(query, page: int, per_page: int):
        per_page = FollowService.clamp_per_page(per_page)
        page = max(page, 1)
        total = query.count()
        items = query.offset((page - 1) * per_page).limit(per_page).all()
        meta = {
            "current_page": page,
            "per_page": per_page,
            "total": total,
            "last_page": max(math.ceil(total / per_page), 1),
        }
        return items, meta

    @staticmethod
    def get_followers(user: User, db: Session, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> dict:
        """Users following `user`, each flagged with whether `user` follows them back"""
        follow_back = aliased(Follow)
        follows_back = exists().where(and_(follow_back.follower_id == user.id, follow_back.following_id == User.id))
        query = (
            db.query(User, follows_back.correlate(User).label("is_followed_by_current_user"))
            .join(Follow, Follow.follower_id == User.id)
            .filter(Follow.following_id == user.id)
            .options(selectinload(User.skills))
            .order_by(Follow.id.desc())
        )
        rows, meta = FollowService._paginate(query, page=page, per_page=per_page)
        data = [
            FollowUserSummary(
                id=follower.id,
                name=follower.name,
                profile_picture_path=follower.profile_picture_path,
                skills=follower.skills,
                is_followed_by_current_user=bool(is_followed),
            ).model_dump(mode="json")
            for follower, is_followed in rows
        ]
        return {"data": data, **meta}

    @staticmethod
    def get_following(user: User, db: Session, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> dict:
        query = (
            db.query(User)
            .join(Follow, Follow.following_id == User.id)
            .filter(Follow.follower_id == user.id)
            .options(selectinload(User.skills))
            .order_by(Follow.id.desc())
        )
        users, meta = FollowService._paginate(query, page=page, per_page=per_page)
        data = [
            FollowUserSummary(
                id=followed.id,
                name=followed.name,
                profile_picture_path=followed.profile_picture_path,
                skills=followed.skills,
                is_followed_by_current_user=True,
            ).model_dump(mode="json")
            for followed in users
        ]
        return {"data": data, **meta}
