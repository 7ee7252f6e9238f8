from .base import *  # noqa: F401,F403
from .base import db_config, env_flag

DB_CONFIG = db_config()

DEBUG = True

# If enabled, schema.sql is applied on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
# Optional: also seed the config row and default shifts
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
