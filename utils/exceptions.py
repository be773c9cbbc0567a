class InvalidPhoneNumber(ValueError):
    """Raised when a phone number cannot be brought into the +989XXXXXXXXX form."""

    def __init__(self, phone_number):
        self.phone_number = phone_number
        super().__init__(f"Could not normalize phone number: {phone_number!r}")


class OtpError(Exception):
    """Base class for one-time passcode verification failures."""


class OtpExpired(OtpError):
    """The code matched a stored record whose validity window has passed."""


class OtpInvalid(OtpError):
    """No stored record matches the submitted phone number and code."""


class PersistenceFailure(Exception):
    """A storage-layer fault while issuing or verifying a code."""


class NotificationFailure(Exception):
    """The code could not be handed to the out-of-band delivery channel."""
