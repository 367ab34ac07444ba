from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from .api.client import ApiClient, ApiConfig
from .api.token_store import SessionTokenStore, TokenStore
from .attendance.http_attendance_repository import HttpAttendanceRepository
from .attendance.service import AttendanceService
from .auth.http_auth_repository import HttpAuthRepository
from .auth.service import AuthService
from .branches.http_branch_repository import HttpBranchRepository
from .branches.service import AcademyContext
from .consultations.http_consultation_repository import HttpConsultationRepository, HttpPublicConsultationRepository
from .consultations.public_service import PublicBookingService
from .consultations.service import ConsultationService, ConsultationSettingsService
from .instructors.http_instructor_repository import HttpInstructorRepository
from .instructors.service import InstructorService
from .payments.http_payment_repository import (
    HttpExpenseRepository,
    HttpIncomeRepository,
    HttpPaymentRepository,
    HttpSalaryRepository,
)
from .payments.service import ExpenseService, IncomeService, PaymentService, SalaryService
from .reports.http_report_repository import HttpReportRepository
from .reports.service import ReportService
from .schedules.http_schedule_repository import HttpScheduleRepository
from .schedules.service import ScheduleService
from .scoreboard.http_scoreboard_repository import HttpScoreboardRepository
from .scoreboard.service import ScoreboardService
from .seasons.http_season_repository import HttpSeasonRepository
from .seasons.service import SeasonService
from .settings.http_settings_repository import HttpSettingsRepository
from .settings.service import SettingsService
from .sms.http_sms_repository import HttpSmsRepository
from .sms.service import SmsService
from .staff.http_staff_repository import HttpStaffRepository
from .staff.service import StaffService
from .students.http_student_repository import HttpStudentRepository
from .students.service import StudentService
from .training.http_training_repository import (
    HttpAssignmentRepository,
    HttpExercisePackRepository,
    HttpExerciseRepository,
    HttpExerciseTagRepository,
    HttpMonthlyTestRepository,
    HttpPlanRepository,
    HttpPresetRepository,
    HttpRecordRepository,
    HttpRecordTypeRepository,
    HttpScoreTableRepository,
    HttpTrainingLogRepository,
    HttpTrainingStatsRepository,
)
from .training.service import (
    DailyTrainingService,
    MonthlyTestService,
    TrainingCatalogService,
    TrainingRecordService,
    TrainingSettingsService,
)


@dataclass(frozen=True)
class Container:
    client: ApiClient
    tokens: TokenStore
    public_base_url: str

    auth_service: AuthService
    academy_context: AcademyContext

    student_service: StudentService
    instructor_service: InstructorService
    schedule_service: ScheduleService
    season_service: SeasonService
    attendance_service: AttendanceService

    payment_service: PaymentService
    salary_service: SalaryService
    income_service: IncomeService
    expense_service: ExpenseService

    consultation_service: ConsultationService
    consultation_settings_service: ConsultationSettingsService
    public_booking_service: PublicBookingService

    staff_service: StaffService
    settings_service: SettingsService
    report_service: ReportService
    sms_service: SmsService

    training_catalog_service: TrainingCatalogService
    daily_training_service: DailyTrainingService
    training_record_service: TrainingRecordService
    monthly_test_service: MonthlyTestService
    training_settings_service: TrainingSettingsService

    scoreboard_service: ScoreboardService


def build_container(
    *,
    api_base_url: str,
    api_timeout: float,
    public_base_url: str = "",
    tokens: Optional[TokenStore] = None,
    session: Optional[requests.Session] = None,
) -> Container:
    tokens = tokens or SessionTokenStore()
    client = ApiClient(ApiConfig(base_url=api_base_url, timeout=api_timeout), tokens, session=session)

    consultations_repo = HttpConsultationRepository(client)
    record_types_repo = HttpRecordTypeRepository(client)
    training_stats_repo = HttpTrainingStatsRepository(client)

    return Container(
        client=client,
        tokens=tokens,
        public_base_url=public_base_url.rstrip("/"),
        auth_service=AuthService(HttpAuthRepository(client), tokens),
        academy_context=AcademyContext(HttpBranchRepository(client), tokens),
        student_service=StudentService(HttpStudentRepository(client)),
        instructor_service=InstructorService(HttpInstructorRepository(client)),
        schedule_service=ScheduleService(HttpScheduleRepository(client)),
        season_service=SeasonService(HttpSeasonRepository(client)),
        attendance_service=AttendanceService(HttpAttendanceRepository(client)),
        payment_service=PaymentService(HttpPaymentRepository(client)),
        salary_service=SalaryService(HttpSalaryRepository(client)),
        income_service=IncomeService(HttpIncomeRepository(client)),
        expense_service=ExpenseService(HttpExpenseRepository(client)),
        consultation_service=ConsultationService(consultations_repo),
        consultation_settings_service=ConsultationSettingsService(consultations_repo),
        public_booking_service=PublicBookingService(HttpPublicConsultationRepository(client)),
        staff_service=StaffService(HttpStaffRepository(client)),
        settings_service=SettingsService(HttpSettingsRepository(client)),
        report_service=ReportService(HttpReportRepository(client)),
        sms_service=SmsService(HttpSmsRepository(client)),
        training_catalog_service=TrainingCatalogService(
            record_types=record_types_repo,
            score_tables=HttpScoreTableRepository(client),
            exercises=HttpExerciseRepository(client),
            tags=HttpExerciseTagRepository(client),
            packs=HttpExercisePackRepository(client),
            presets=HttpPresetRepository(client),
        ),
        daily_training_service=DailyTrainingService(
            plans=HttpPlanRepository(client),
            assignments=HttpAssignmentRepository(client),
            logs=HttpTrainingLogRepository(client),
        ),
        training_record_service=TrainingRecordService(records=HttpRecordRepository(client), stats=training_stats_repo),
        monthly_test_service=MonthlyTestService(tests=HttpMonthlyTestRepository(client), record_types=record_types_repo),
        training_settings_service=TrainingSettingsService(training_stats_repo),
        scoreboard_service=ScoreboardService(HttpScoreboardRepository(client)),
    )
