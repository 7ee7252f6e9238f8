from .base import *  # noqa: F401,F403
from .base import db_config, env_flag

DB_CONFIG = db_config()

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
