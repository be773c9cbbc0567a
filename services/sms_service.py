from typing import Optional

import requests

from utils import app_logger
from utils.config import SMS_GATEWAY_URL, SMS_API_KEY, SMS_SENDER, SMS_TIMEOUT_SECONDS
from utils.exceptions import NotificationFailure

logger = app_logger.createLogger("sms")


class SmsService:
    """
    Delivers one-time passcodes out of band.

    With SMS_GATEWAY_URL configured the message is POSTed to the gateway as JSON
    ({"receptor", "message", "sender"}) with the API key as a bearer token.
    Without a gateway the code is written to the log, which is the development channel.
    """

    def __init__(self, gateway_url: Optional[str] = SMS_GATEWAY_URL,
                 api_key: Optional[str] = SMS_API_KEY,
                 sender: Optional[str] = SMS_SENDER,
                 timeout: int = SMS_TIMEOUT_SECONDS):
        self.gateway_url = gateway_url
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout

    @staticmethod
    def build_message(code: str) -> str:
        return f"Your verification code is {code}"

    def send_otp(self, phone_number: str, code: str) -> None:
        if not self.gateway_url:
            logger.info(f"OTP for {phone_number}: {code}")
            return

        payload = {"receptor": phone_number, "message": self.build_message(code)}
        if self.sender:
            payload["sender"] = self.sender
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = requests.post(self.gateway_url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout while sending OTP SMS to {phone_number}")
            raise NotificationFailure(str(e)) from e
        except requests.exceptions.RequestException as e:
            app_logger.exceptionlogs(f"Failed to send OTP SMS to {phone_number}, Error: {e}", log="sms")
            raise NotificationFailure(str(e)) from e

        logger.info(f"OTP SMS sent to {phone_number}, status: {response.status_code}")
