"""Batch entry point for an external scheduler (cron, systemd timer...).

    python scripts/run_jobs.py auto-close
    python scripts/run_jobs.py sweep 2024-03-01
"""

from __future__ import annotations

import sys
from datetime import timedelta

from shift_attendance.common.datetime_utils import now_local, parse_iso_date
from shift_attendance.main import create_engine


def main(argv: list[str]) -> int:
    if not argv or argv[0] not in {"auto-close", "sweep"}:
        print(__doc__)
        return 2

    container = create_engine()
    if argv[0] == "auto-close":
        stats = container.auto_close_job.run()
        print(f"closed={stats.closed} skipped={stats.skipped} errors={stats.errors}")
        for line in stats.details:
            print(f"  {line}")
        return 1 if stats.errors else 0

    work_date = parse_iso_date(argv[1]) if len(argv) > 1 else now_local().date() - timedelta(days=1)
    stats = container.end_of_day_sweep.run(work_date)
    print(f"work_date={work_date} reported={stats.reported} clean={stats.clean} errors={stats.errors}")
    return 1 if stats.errors else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
