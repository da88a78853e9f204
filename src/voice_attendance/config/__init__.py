import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "voice_attendance.config.production"

    if env in {"test", "testing"}:
        return "voice_attendance.config.testing"

    return "voice_attendance.config.development"
