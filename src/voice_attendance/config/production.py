import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "voice_attendance"),
}

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

PROFILE_API_URL = os.getenv("PROFILE_API_URL", "https://api.amazon.com/user/profile")
PROFILE_TIMEOUT_SECONDS = float(os.getenv("PROFILE_TIMEOUT_SECONDS", "5"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
