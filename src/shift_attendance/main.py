from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv

from .container import Container, build_container
from .database.bootstrap import apply_schema, seed_defaults
from .incidents.reporter import IncidentReporter
from .schedules.model import AttendanceSettings
from .settings import get_settings_module

logger = logging.getLogger(__name__)


def settings_defaults(settings) -> AttendanceSettings:
    """Engine defaults declared by a settings module."""
    return AttendanceSettings(
        tolerance_minutes=int(settings.TOLERANCE_MINUTES),
        early_check_in_margin_minutes=int(settings.EARLY_CHECK_IN_MARGIN_MINUTES),
        late_check_out_margin_minutes=int(settings.LATE_CHECK_OUT_MARGIN_MINUTES),
        early_departure_tolerance_minutes=int(settings.EARLY_DEPARTURE_TOLERANCE_MINUTES),
        enforce_action_windows=bool(settings.ENFORCE_ACTION_WINDOWS),
    )


def create_engine(*, incidents: Optional[IncidentReporter] = None) -> Container:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    debug = bool(getattr(settings, "DEBUG", False))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db_config = getattr(settings, "DB_CONFIG")
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(db_config)
    if getattr(settings, "AUTO_SEED_DB", False):
        seed_defaults(db_config)

    return build_container(db_config=db_config, defaults=settings_defaults(settings), incidents=incidents)
