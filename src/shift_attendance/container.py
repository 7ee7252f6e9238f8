from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.anomaly import AnomalyDetector
from .attendance.auto_close import AutoCloseJob
from .attendance.factory import AnomalyStrategyFactory
from .attendance.justification_service import JustificationService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.sweep import EndOfDaySweep
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_directory import MySQLEmployeeDirectory
from .incidents.reporter import IncidentReporter, LoggingIncidentReporter
from .payroll.service import DailySummaryService
from .schedules.model import AttendanceSettings
from .schedules.mysql_schedule_catalog import MySQLScheduleCatalog
from .schedules.resolver import ScheduleResolver


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    catalog: MySQLScheduleCatalog
    directory: MySQLEmployeeDirectory
    attendance_repo: MySQLAttendanceRepository

    resolver: ScheduleResolver
    attendance_service: AttendanceService
    justification_service: JustificationService
    summary_service: DailySummaryService
    auto_close_job: AutoCloseJob
    end_of_day_sweep: EndOfDaySweep


def build_container(
    *,
    db_config: dict,
    defaults: Optional[AttendanceSettings] = None,
    incidents: Optional[IncidentReporter] = None,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    catalog = MySQLScheduleCatalog(conn, defaults=defaults)
    directory = MySQLEmployeeDirectory(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    incidents = incidents or LoggingIncidentReporter()
    detector = AnomalyDetector(AnomalyStrategyFactory())
    resolver = ScheduleResolver(catalog, directory)

    attendance_service = AttendanceService(
        attendance_repo,
        resolver,
        catalog,
        incidents=incidents,
        detector=detector,
    )
    justification_service = JustificationService(attendance_repo, catalog)
    summary_service = DailySummaryService(attendance_repo, resolver, catalog, detector=detector)
    auto_close_job = AutoCloseJob(attendance_repo, resolver, catalog, attendance_service)
    end_of_day_sweep = EndOfDaySweep(
        attendance_repo,
        resolver,
        catalog,
        directory,
        incidents=incidents,
        detector=detector,
    )

    return Container(
        conn=conn,
        catalog=catalog,
        directory=directory,
        attendance_repo=attendance_repo,
        resolver=resolver,
        attendance_service=attendance_service,
        justification_service=justification_service,
        summary_service=summary_service,
        auto_close_job=auto_close_job,
        end_of_day_sweep=end_of_day_sweep,
    )
