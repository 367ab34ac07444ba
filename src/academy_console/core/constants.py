"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_API_BASE_URL = "http://localhost:8350/api/v1"
DEFAULT_API_TIMEOUT = 10.0
DEFAULT_PAGE_LIMIT = 50
DEFAULT_CONSULTATION_MINUTES = 30

# Weekday keys used by the consultation weekly hours, Monday first.
WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
WEEKDAY_LABELS = {
    "mon": "월",
    "tue": "화",
    "wed": "수",
    "thu": "목",
    "fri": "금",
    "sat": "토",
    "sun": "일",
}

ALL_BRANCHES = "all"

GENERIC_FAILURE_MESSAGE = "작업에 실패했습니다"
