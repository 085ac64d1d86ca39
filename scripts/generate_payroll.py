"""Run one payroll generation batch from the command line (e.g. from cron)."""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from hrm_system.container import build_container
from hrm_system.core.exceptions import DomainError, EmptyBatchError, PartialLinkFailure


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)

    try:
        result = container.payroll_service.generate()
    except EmptyBatchError as e:
        print(f"OK: {e}")
        return 0
    except PartialLinkFailure as e:
        print(f"ERROR: {e}")
        for f in e.failures:
            state = "rolled back" if f.compensated else "NOT rolled back, repair manually"
            print(f"  employee {f.employee_id}: payroll {f.payroll_id} linked {f.linked}/{f.expected} ({state})")
        return 2
    except DomainError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"OK: {result.message} ({result.attendance_linked} attendance row(s) linked)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
