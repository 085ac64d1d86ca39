from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .activities.service import ActivityService
from .appointments.mysql_appointment_repository import MySQLAppointmentRepository
from .appointments.repository import AppointmentRepository
from .appointments.service import AppointmentService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger
from .core.constants import DEFAULT_PAYROLL_LOCK_TIMEOUT
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .integrations.attachments import AttachmentStorage, LocalAttachmentStorage
from .integrations.google_calendar import CalendarClient, GoogleCalendarClient, static_token
from .payroll.calculator.factory import PayCalculatorFactory
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .projects.service import ProjectService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    payroll_repo: PayrollRepository
    projects_repo: ProjectRepository
    tasks_repo: TaskRepository
    appointments_repo: AppointmentRepository

    attachment_storage: AttachmentStorage

    employee_service: EmployeeService
    attendance_ledger: AttendanceLedger
    payroll_service: PayrollService
    project_service: ProjectService
    task_service: TaskService
    appointment_service: AppointmentService
    activity_service: ActivityService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    payroll_repo: PayrollRepository,
    projects_repo: ProjectRepository,
    tasks_repo: TaskRepository,
    appointments_repo: AppointmentRepository,
    attachment_storage: AttachmentStorage,
    calendar: Optional[CalendarClient] = None,
    calendar_timezone: str = "UTC",
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services on top of a given set of repositories."""
    payroll_service = PayrollService(
        payroll_repo,
        attendance_repo,
        employees_repo,
        calculators=PayCalculatorFactory(),
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        projects_repo=projects_repo,
        tasks_repo=tasks_repo,
        appointments_repo=appointments_repo,
        attachment_storage=attachment_storage,
        employee_service=EmployeeService(employees_repo),
        attendance_ledger=AttendanceLedger(attendance_repo, employees_repo),
        payroll_service=payroll_service,
        project_service=ProjectService(projects_repo, tasks_repo),
        task_service=TaskService(tasks_repo, employees_repo, projects_repo, storage=attachment_storage),
        appointment_service=AppointmentService(
            appointments_repo,
            employees_repo,
            calendar=calendar,
            calendar_timezone=calendar_timezone,
        ),
        activity_service=ActivityService(employees_repo, tasks_repo, payroll_repo, attendance_repo),
        dashboard_service=DashboardService(
            employees_repo,
            projects_repo,
            tasks_repo,
            attendance_repo,
            payroll_repo,
            payroll_service,
        ),
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    calendar = None
    token = getattr(settings, "GOOGLE_CALENDAR_ACCESS_TOKEN", None)
    if token:
        calendar = GoogleCalendarClient(
            static_token(token),
            calendar_id=getattr(settings, "GOOGLE_CALENDAR_ID", "primary"),
        )

    return wire(
        conn=conn,
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payroll_repo=MySQLPayrollRepository(
            conn,
            lock_timeout=int(getattr(settings, "PAYROLL_LOCK_TIMEOUT", DEFAULT_PAYROLL_LOCK_TIMEOUT)),
        ),
        projects_repo=MySQLProjectRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        appointments_repo=MySQLAppointmentRepository(conn),
        attachment_storage=LocalAttachmentStorage(
            getattr(settings, "ATTACHMENT_DIR", "uploads"),
            base_url=getattr(settings, "ATTACHMENT_BASE_URL", "/attachments"),
        ),
        calendar=calendar,
        calendar_timezone=getattr(settings, "GOOGLE_CALENDAR_TIMEZONE", "UTC"),
    )
