STATUS_500_MSG = "Could not process request. Please try again later."
UNAUTHENTICATED = "Unauthenticated."

OTP_SENT = "OTP has been sent successfully."
OTP_SEND_FAILED = "Could not send OTP code. Please try again later."
OTP_EXPIRED = "OTP has expired. Please request a new one."
INVALID_OTP = "Invalid OTP code."
INVALID_PHONE_NUMBER = "The phone number format is invalid."
LOGIN_SUCCESS = "Login successful."
LOGGED_OUT = "Logged out successfully."

USER_NOT_FOUND = "User not found."
PROFILE_LOAD_FAILED = "Could not load full profile data."
PROFILE_UPDATE_FAILED = "Profile update failed. Please try again."
SKILL_UPDATE_FAILED = "Skill update failed. Please try again."

CANNOT_FOLLOW_SELF = "You cannot follow yourself."
INVALID_FOLLOW_ACTION = "Invalid action."
ALREADY_FOLLOWING = "Already following this user."
NOT_FOLLOWING = "You were not following this user."
FOLLOW_FAILED = "Could not follow user at this time."
UNFOLLOW_FAILED = "Could not unfollow user at this time."
FOLLOWERS_FAILED = "Could not retrieve followers."
FOLLOWING_FAILED = "Could not retrieve following list."
SEARCH_FAILED = "Error during search. Please try again."
