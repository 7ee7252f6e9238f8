from .base import *  # noqa: F401,F403
from .base import db_config, env_flag

DB_CONFIG = db_config(default_database="shift_attendance_test")

DEBUG = False
TESTING = True

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
