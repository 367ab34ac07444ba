from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """사용자 역할 (권한 판단에 사용)."""

    OWNER = "owner"
    ADMIN = "admin"
    STAFF = "staff"
    TEACHER = "teacher"


class StudentStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    WITHDRAWN = "withdrawn"
    GRADUATED = "graduated"
    TRIAL = "trial"
    PENDING = "pending"


class TimeSlot(str, Enum):
    """Coarse scheduling bucket for classes and training assignments."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class ConsultationStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"


class MonthlyTestStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class RecordDirection(str, Enum):
    HIGHER = "higher"
    LOWER = "lower"


STUDENT_STATUS_LABELS = {
    StudentStatus.ACTIVE: "재원",
    StudentStatus.PAUSED: "휴원",
    StudentStatus.WITHDRAWN: "퇴원",
    StudentStatus.GRADUATED: "졸업",
    StudentStatus.TRIAL: "체험",
    StudentStatus.PENDING: "미등록",
}

TIME_SLOT_LABELS = {
    TimeSlot.MORNING: "오전",
    TimeSlot.AFTERNOON: "오후",
    TimeSlot.EVENING: "저녁",
}

CONSULTATION_STATUS_LABELS = {
    ConsultationStatus.PENDING: "대기",
    ConsultationStatus.IN_PROGRESS: "진행중",
    ConsultationStatus.COMPLETED: "완료",
    ConsultationStatus.CANCELLED: "취소",
}

PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "현금",
    PaymentMethod.CARD: "카드",
    PaymentMethod.TRANSFER: "계좌이체",
}

TEST_STATUS_LABELS = {
    MonthlyTestStatus.DRAFT: "준비중",
    MonthlyTestStatus.ACTIVE: "진행중",
    MonthlyTestStatus.COMPLETED: "완료",
}

ROLE_LABELS = {
    UserRole.OWNER: "원장",
    UserRole.ADMIN: "관리자",
    UserRole.STAFF: "직원",
    UserRole.TEACHER: "강사",
}

# Form select options keyed by the raw value.
TIME_SLOT_OPTIONS = {t.value: label for t, label in TIME_SLOT_LABELS.items()}
