from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from starlette.responses import JSONResponse

from db.db_conn import get_db
from db.schemas import OtpRequest, OtpLogin, OtpRequestResponse
from services.otp_service import OtpService
from services.user_service import UserService
from utils import app_logger, resp_msgs
from utils.app_helper import revoke_token
from utils.dependencies import get_otp_service, get_bearer_token
from utils.exceptions import OtpExpired, OtpInvalid, PersistenceFailure, NotificationFailure

router = APIRouter(prefix="/auth", tags=["auth"])
logger = app_logger.createLogger("app")


@router.post("/otp/request", status_code=status.HTTP_200_OK, name="request-otp")
@app_logger.functionlogs(log="app")
def request_otp(request: OtpRequest,
                db: Session = Depends(get_db),
                otp_service: OtpService = Depends(get_otp_service)):
    try:
        issued = otp_service.request_otp(phone_number=request.phone_number, db=db)
    except NotificationFailure:
        return JSONResponse(
            content={"message": resp_msgs.OTP_SEND_FAILED},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    except PersistenceFailure:
        return JSONResponse(
            content={"message": resp_msgs.STATUS_500_MSG},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    except Exception as e:
        app_logger.exceptionlogs(f"Error in request otp, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.STATUS_500_MSG},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    response = OtpRequestResponse(message=resp_msgs.OTP_SENT)
    if otp_service.expose_otp_in_response:
        response.otp_for_testing = issued.code
    return JSONResponse(
        content=response.model_dump(exclude_none=True),
        status_code=status.HTTP_200_OK
    )


@router.post("/otp/login", status_code=status.HTTP_200_OK, name="login-with-otp")
@app_logger.functionlogs(log="app")
def login_with_otp(request: OtpLogin,
                   db: Session = Depends(get_db),
                   otp_service: OtpService = Depends(get_otp_service)):
    try:
        session = otp_service.login_with_otp(phone_number=request.phone_number, code=request.otp, db=db)
        user = UserService.build_profile(user=session.user, db=db)
    except OtpExpired:
        return JSONResponse(
            content={"message": resp_msgs.OTP_EXPIRED},
            status_code=status.HTTP_401_UNAUTHORIZED
        )
    except OtpInvalid:
        return JSONResponse(
            content={"message": resp_msgs.INVALID_OTP},
            status_code=status.HTTP_401_UNAUTHORIZED
        )
    except PersistenceFailure:
        return JSONResponse(
            content={"message": resp_msgs.STATUS_500_MSG},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    except Exception as e:
        app_logger.exceptionlogs(f"Error while logging in with otp, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.STATUS_500_MSG},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return JSONResponse(
        content={
            "message": resp_msgs.LOGIN_SUCCESS,
            "access_token": session.access_token,
            "token_type": session.token_type,
            "user": user.model_dump(mode="json"),
        },
        status_code=status.HTTP_200_OK
    )


@router.post("/logout", status_code=status.HTTP_200_OK, name="logout")
@app_logger.functionlogs(log="app")
def logout(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)):
    """Revoke the bearer token used for this request"""
    try:
        if not revoke_token(token, db=db):
            return JSONResponse(
                content={"message": resp_msgs.UNAUTHENTICATED},
                status_code=status.HTTP_401_UNAUTHORIZED
            )
    except Exception as e:
        app_logger.exceptionlogs(f"Error in logout, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.STATUS_500_MSG},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return JSONResponse(
        content={"message": resp_msgs.LOGGED_OUT},
        status_code=status.HTTP_200_OK
    )
