import os

from ..core import constants


def env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def env_flag(name: str, default: bool) -> bool:
    return bool(int(os.getenv(name, "1" if default else "0")))


def db_config(default_password: str = "", default_database: str = "shift_attendance") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": env_int("DB_PORT", 3306),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", default_database),
    }


# Engine defaults; the attendance_config row overrides any non-NULL column.
TOLERANCE_MINUTES = env_int("TOLERANCE_MINUTES", constants.DEFAULT_TOLERANCE_MINUTES)
EARLY_CHECK_IN_MARGIN_MINUTES = env_int("EARLY_CHECK_IN_MARGIN_MINUTES", constants.DEFAULT_EARLY_CHECK_IN_MARGIN_MINUTES)
LATE_CHECK_OUT_MARGIN_MINUTES = env_int("LATE_CHECK_OUT_MARGIN_MINUTES", constants.DEFAULT_LATE_CHECK_OUT_MARGIN_MINUTES)
EARLY_DEPARTURE_TOLERANCE_MINUTES = env_int(
    "EARLY_DEPARTURE_TOLERANCE_MINUTES", constants.DEFAULT_EARLY_DEPARTURE_TOLERANCE_MINUTES
)
ENFORCE_ACTION_WINDOWS = env_flag("ENFORCE_ACTION_WINDOWS", False)
