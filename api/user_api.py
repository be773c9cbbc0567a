from fastapi import APIRouter, status, Depends, Query
from sqlalchemy.orm import Session
from starlette.responses import JSONResponse

from db.db_conn import get_db
from db.models import User
from db.schemas import UserProfileUpdate, UserSkillsUpdate
from services.follow_service import FollowService, AlreadyFollowing, DEFAULT_PER_PAGE
from services.user_service import UserService
from utils import app_logger, resp_msgs
from utils.dependencies import get_current_user

router = APIRouter(tags=["users"])

logger = app_logger.createLogger("app")


@router.get("/user", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def user_profile(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    try:
        profile = UserService.build_profile(user=current_user, db=db)
        return JSONResponse(content=profile.model_dump(mode="json"), status_code=status.HTTP_200_OK)
    except Exception as e:
        app_logger.exceptionlogs(f"Failed to load profile for user {current_user.id}, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.PROFILE_LOAD_FAILED},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.put("/user", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def update_user_profile(user_profile_data: UserProfileUpdate,
                        db: Session = Depends(get_db),
                        current_user: User = Depends(get_current_user)):
    try:
        user = UserService.update_user_data(user=current_user, user_profile_data=user_profile_data, db=db)
        profile = UserService.build_profile(user=user, db=db)
        return JSONResponse(content=profile.model_dump(mode="json"), status_code=status.HTTP_200_OK)
    except Exception as e:
        db.rollback()
        app_logger.exceptionlogs(f"Profile update failed for user {current_user.id}, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.PROFILE_UPDATE_FAILED},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.put("/user/skills", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def update_user_skills(skills_data: UserSkillsUpdate,
                       db: Session = Depends(get_db),
                       current_user: User = Depends(get_current_user)):
    missing = UserService.find_missing_skill_ids(skill_ids=skills_data.skill_ids, db=db)
    if missing:
        errors = {}
        for index, skill_id in enumerate(skills_data.skill_ids):
            if skill_id in missing:
                errors[f"skill_ids.{index}"] = [f"The selected skill_ids.{index} is invalid."]
        return JSONResponse(content={"errors": errors}, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)

    try:
        user = UserService.sync_skills(user=current_user, skill_ids=skills_data.skill_ids, db=db)
        profile = UserService.build_profile(user=user, db=db)
        return JSONResponse(content=profile.model_dump(mode="json"), status_code=status.HTTP_200_OK)
    except Exception as e:
        db.rollback()
        app_logger.exceptionlogs(f"Skill update failed for user {current_user.id}, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.SKILL_UPDATE_FAILED},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.get("/user/following-ids", status_code=status.HTTP_200_OK)
def following_ids(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return JSONResponse(
        content=FollowService.get_following_ids(user_id=current_user.id, db=db),
        status_code=status.HTTP_200_OK
    )


@router.get("/user/followers", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def user_followers(page: int = Query(1, ge=1),
                   per_page: int = Query(DEFAULT_PER_PAGE),
                   db: Session = Depends(get_db),
                   current_user: User = Depends(get_current_user)):
    try:
        followers = FollowService.get_followers(user=current_user, db=db, page=page, per_page=per_page)
        return JSONResponse(content=followers, status_code=status.HTTP_200_OK)
    except Exception as e:
        app_logger.exceptionlogs(f"Failed to paginate followers for user {current_user.id}, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.FOLLOWERS_FAILED},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.get("/user/following", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def user_following(page: int = Query(1, ge=1),
                   per_page: int = Query(DEFAULT_PER_PAGE),
                   db: Session = Depends(get_db),
                   current_user: User = Depends(get_current_user)):
    try:
        following = FollowService.get_following(user=current_user, db=db, page=page, per_page=per_page)
        return JSONResponse(content=following, status_code=status.HTTP_200_OK)
    except Exception as e:
        app_logger.exceptionlogs(f"Failed to paginate following list for user {current_user.id}, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.FOLLOWING_FAILED},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.get("/users/{user_id}", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def public_profile(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = UserService.get_user_by_id(user_id=user_id, db=db)
    if not user:
        return JSONResponse(content={"message": resp_msgs.USER_NOT_FOUND}, status_code=status.HTTP_404_NOT_FOUND)

    try:
        profile = UserService.build_public_profile(user=user, viewer=current_user, db=db)
        return JSONResponse(content=profile.model_dump(mode="json"), status_code=status.HTTP_200_OK)
    except Exception as e:
        app_logger.exceptionlogs(f"Failed to load data for public profile {user_id}, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.PROFILE_LOAD_FAILED},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.post("/users/{user_id}/follow", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def follow_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = UserService.get_user_by_id(user_id=user_id, db=db)
    if not user:
        return JSONResponse(content={"message": resp_msgs.USER_NOT_FOUND}, status_code=status.HTTP_404_NOT_FOUND)

    if user.id == current_user.id:
        return JSONResponse(
            content={"message": resp_msgs.CANNOT_FOLLOW_SELF},
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )

    try:
        FollowService.follow(follower=current_user, following=user, db=db)
    except AlreadyFollowing:
        return JSONResponse(content={"message": resp_msgs.ALREADY_FOLLOWING}, status_code=status.HTTP_409_CONFLICT)
    except Exception as e:
        db.rollback()
        app_logger.exceptionlogs(f"Follow action failed: User {current_user.id} -> User {user.id}, Error: {e}")
        return JSONResponse(content={"message": resp_msgs.FOLLOW_FAILED},
                            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(
        content={"message": f"You are now following {user.name or user.phone_number}."},
        status_code=status.HTTP_200_OK
    )


@router.delete("/users/{user_id}/follow", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def unfollow_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = UserService.get_user_by_id(user_id=user_id, db=db)
    if not user:
        return JSONResponse(content={"message": resp_msgs.USER_NOT_FOUND}, status_code=status.HTTP_404_NOT_FOUND)

    if user.id == current_user.id:
        return JSONResponse(
            content={"message": resp_msgs.INVALID_FOLLOW_ACTION},
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )

    try:
        unfollowed = FollowService.unfollow(follower=current_user, following=user, db=db)
    except Exception as e:
        db.rollback()
        app_logger.exceptionlogs(f"Unfollow action failed: User {current_user.id} -> User {user.id}, Error: {e}")
        return JSONResponse(content={"message": resp_msgs.UNFOLLOW_FAILED},
                            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not unfollowed:
        return JSONResponse(content={"message": resp_msgs.NOT_FOLLOWING}, status_code=status.HTTP_404_NOT_FOUND)

    return JSONResponse(
        content={"message": f"You have unfollowed {user.name or user.phone_number}."},
        status_code=status.HTTP_200_OK
    )


@router.get("/search/users", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def search_users(q: str = Query(""),
                 page: int = Query(1, ge=1),
                 per_page: int = Query(DEFAULT_PER_PAGE),
                 db: Session = Depends(get_db),
                 current_user: User = Depends(get_current_user)):
    try:
        results = UserService.search_users(term=q, viewer=current_user, db=db, page=page, per_page=per_page)
        return JSONResponse(content=results, status_code=status.HTTP_200_OK)
    except Exception as e:
        app_logger.exceptionlogs(f"Search for '{q}' failed for user {current_user.id}, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.SEARCH_FAILED},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
