from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from db.db_conn import get_db
from services.otp_service import OtpService
from utils import resp_msgs
from utils.app_helper import verify_user_from_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/otp/login", auto_error=False)


def get_bearer_token(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=resp_msgs.UNAUTHENTICATED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def get_current_user(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)):
    is_verified, msg, user = verify_user_from_token(token, db=db)
    if not is_verified:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=msg,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def get_otp_service() -> OtpService:
    return OtpService()
