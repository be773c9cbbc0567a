import hashlib
import hmac
import secrets
from datetime import datetime, timezone, timedelta
from typing import Optional

import jwt
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from db.models import User, PersonalAccessToken
from utils import app_logger
from utils.config import SECRET_KEY, HASH_SECRET, ACCESS_TOKEN_EXPIRE_MINUTES

logger = app_logger.createLogger("app")

JWT_ALGORITHM = "HS256"


def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"][1:]) or str(error["loc"][0])
        ctx_error = (error.get("ctx") or {}).get("error")
        message = str(ctx_error) if error.get("type") == "value_error" and ctx_error else error["msg"]
        errors.setdefault(field, []).append(message)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"errors": errors},
    )


def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def hash_mobile_number(mobile_number):
    """
        Hashes mobile number using HMAC-SHA256
        :param mobile_number
    """
    return hmac.new(HASH_SECRET.encode(), str(mobile_number).encode(), hashlib.sha256).hexdigest()


def hash_token_id(token_id: str) -> str:
    return hashlib.sha256(token_id.encode()).hexdigest()


def create_auth_token(user: User, db: Session, commit: bool = True) -> str:
    """
        Mints a bearer token for the user and records it so it can be revoked.
        The token only expires when ACCESS_TOKEN_EXPIRE_MINUTES is configured.
        With commit=False the record is only flushed into the caller's transaction.
    """
    token_id = secrets.token_urlsafe(32)
    now = datetime.now(timezone.utc)

    db.add(PersonalAccessToken(
        user_id=user.id,
        name=f"api-token-{user.id}",
        token_hash=hash_token_id(token_id),
    ))
    if commit:
        db.commit()
    else:
        db.flush()

    data = {
        "user_id": user.id,
        "mobile_number": hash_mobile_number(user.phone_number),
        "jti": token_id,
        "iat": now,
    }
    if ACCESS_TOKEN_EXPIRE_MINUTES > 0:
        data["exp"] = now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    return jwt.encode(data, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_jwt(token: str) -> Optional[dict]:
    """Decodes and verifies JWT token, None when it is malformed, tampered or expired"""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
    except jwt.InvalidTokenError:
        logger.debug("Rejected invalid token")
    return None


def get_access_token_record(token: str, db: Session) -> Optional[PersonalAccessToken]:
    """Returns the stored record behind a bearer token, None when the token is not (or no longer) valid"""
    payload = decode_jwt(token)
    if not payload or not payload.get("jti"):
        return None

    record = db.query(PersonalAccessToken).filter(
        PersonalAccessToken.token_hash == hash_token_id(payload["jti"]),
        PersonalAccessToken.user_id == payload.get("user_id"),
    ).first()
    if not record or not record.user:
        return None

    if not hmac.compare_digest(hash_mobile_number(record.user.phone_number), str(payload.get("mobile_number"))):
        return None
    return record


def verify_user_from_token(token: str, db: Session):
    """Verifies user from JWT token"""
    record = get_access_token_record(token, db)
    if not record:
        return False, "Unauthenticated.", None

    record.last_used_at = datetime.now(timezone.utc)
    db.commit()
    return True, None, record.user


def revoke_token(token: str, db: Session) -> bool:
    record = get_access_token_record(token, db)
    if not record:
        return False
    db.delete(record)
    db.commit()
    return True
