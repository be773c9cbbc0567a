import secrets
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models import Otp, User
from services.sms_service import SmsService
from services.user_service import UserService
from utils import app_logger
from utils.app_helper import create_auth_token
from utils.config import OTP_LENGTH, OTP_VALIDITY_MINUTES, EXPOSE_OTP_IN_RESPONSE
from utils.exceptions import OtpExpired, OtpInvalid, PersistenceFailure
from utils.phone import normalize_phone_number

logger = app_logger.createLogger("app")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OtpIssueResult:
    phone_number: str
    code: str
    expires_at: datetime


@dataclass
class SessionResult:
    user: User
    access_token: str
    token_type: str = "Bearer"


class OtpService:
    """
    Phone number login with one-time passcodes.

    Per phone number there is at most one stored code. Requesting a new code
    replaces the previous one; a code is consumed by a successful login, and an
    expired code is removed the first time somebody tries to use it. Expiry is
    only ever checked at verification time.
    """

    def __init__(self, otp_length: int = OTP_LENGTH,
                 validity_minutes: float = OTP_VALIDITY_MINUTES,
                 expose_otp_in_response: bool = EXPOSE_OTP_IN_RESPONSE,
                 notifier: Optional[SmsService] = None,
                 clock: Callable[[], datetime] = utc_now):
        if otp_length < 1:
            raise ValueError("otp_length must be positive")
        self.otp_length = otp_length
        self.validity = timedelta(minutes=validity_minutes)
        self.expose_otp_in_response = expose_otp_in_response
        self.notifier = notifier or SmsService()
        self.clock = clock

    def generate_otp(self) -> str:
        """Uniform over 10**(n-1) .. 10**n - 1, so codes never start with zero."""
        low = 10 ** (self.otp_length - 1)
        high = 10 ** self.otp_length - 1
        return str(low + secrets.randbelow(high - low + 1))

    def request_otp(self, phone_number: str, db: Session) -> OtpIssueResult:
        """
            Replaces any pending code for the phone number with a fresh one and dispatches it.
            :raises InvalidPhoneNumber: phone number cannot be normalized
            :raises PersistenceFailure: the new code could not be stored
            :raises NotificationFailure: the code was stored but could not be delivered
        """
        phone_number = normalize_phone_number(phone_number)
        code = self.generate_otp()
        expires_at = self.clock() + self.validity

        try:
            db.query(Otp).filter(Otp.phone_number == phone_number).delete(synchronize_session=False)
            db.add(Otp(phone_number=phone_number, code=code, expires_at=expires_at))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            app_logger.exceptionlogs(f"Failed to store OTP for {phone_number}, Error: {e}")
            raise PersistenceFailure(str(e)) from e

        self.notifier.send_otp(phone_number, code)
        logger.info(f"OTP issued for {phone_number}, expires at {expires_at.isoformat()}")
        return OtpIssueResult(phone_number=phone_number, code=code, expires_at=expires_at)

    def verify_otp(self, phone_number: str, code: str, db: Session, commit: bool = True) -> str:
        """
            Consumes the matching code. Deleting with the expiry predicate in the
            WHERE clause makes check-and-consume one statement, so two concurrent
            submissions of the same code cannot both succeed.
            With commit=False a successful consumption stays in the open transaction
            so the caller can commit it together with its own writes.
            :return: the normalized phone number
            :raises OtpExpired: the code matched but its window has passed (the record is removed)
            :raises OtpInvalid: no stored code matches
        """
        phone_number = normalize_phone_number(phone_number)
        now = self.clock()

        try:
            consumed = db.query(Otp).filter(
                Otp.phone_number == phone_number,
                Otp.code == code,
                Otp.expires_at > now,
            ).delete(synchronize_session=False)

            expired = 0
            if not consumed:
                expired = db.query(Otp).filter(
                    Otp.phone_number == phone_number,
                    Otp.code == code,
                ).delete(synchronize_session=False)
            if commit or not consumed:
                db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            app_logger.exceptionlogs(f"Failed to verify OTP for {phone_number}, Error: {e}")
            raise PersistenceFailure(str(e)) from e

        if consumed:
            return phone_number
        if expired:
            logger.info(f"Expired OTP presented for {phone_number}")
            raise OtpExpired(phone_number)
        logger.info(f"Invalid OTP presented for {phone_number}")
        raise OtpInvalid(phone_number)

    def login_with_otp(self, phone_number: str, code: str, db: Session) -> SessionResult:
        """
            Consumes the code, finds or creates the user and mints a token in one
            transaction. If any of it fails nothing is kept and the code stays usable.
        """
        phone_number = self.verify_otp(phone_number, code, db, commit=False)

        try:
            user = UserService.get_or_create_user_by_phone_number(
                phone_number=phone_number, db=db, verified_at=self.clock(), commit=False
            )
            access_token = create_auth_token(user, db, commit=False)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            app_logger.exceptionlogs(f"Failed to open session for {phone_number}, Error: {e}")
            raise PersistenceFailure(str(e)) from e

        logger.info(f"User {user.id} logged in with OTP")
        return SessionResult(user=user, access_token=access_token)
