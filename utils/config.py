import os


def _as_bool(value, default=False):
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _database_url():
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    db_name = os.getenv("DB_NAME")
    db_user = os.getenv("DB_USER")
    db_pass = os.getenv("DB_PASS")
    db_host = os.getenv("DB_HOST")
    return f"postgresql+psycopg2://{db_user}:{db_pass}@{db_host}/{db_name}"


DATABASE_URL = _database_url()

SECRET_KEY = os.getenv("SECRET_KEY")
HASH_SECRET = os.getenv("HASH_SECRET") or SECRET_KEY
# no exp claim is written when unset
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES") or 0)

OTP_LENGTH = int(os.getenv("OTP_LENGTH", 6))
OTP_VALIDITY_MINUTES = int(os.getenv("OTP_VALIDITY_MINUTES", 5))
EXPOSE_OTP_IN_RESPONSE = _as_bool(os.getenv("EXPOSE_OTP_IN_RESPONSE"))

SMS_GATEWAY_URL = os.getenv("SMS_GATEWAY_URL")
SMS_API_KEY = os.getenv("SMS_API_KEY")
SMS_SENDER = os.getenv("SMS_SENDER")
SMS_TIMEOUT_SECONDS = int(os.getenv("SMS_TIMEOUT_SECONDS", 10))

REDIS_HOST = os.getenv("REDIS_HOST")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
SKILLS_CACHE_TTL = int(os.getenv("SKILLS_CACHE_TTL", 3600))

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]
