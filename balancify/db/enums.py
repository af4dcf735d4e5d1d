# db/enums.py

import enum
from sqlalchemy import TypeDecorator, String

class GoalPriority(str, enum.Enum):
    """Priority the user attached to a financial goal."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

class GoalCategory(str, enum.Enum):
    """What a financial goal is saving towards."""
    EMERGENCY = "emergency"
    INVESTMENT = "investment"
    PURCHASE = "purchase"
    RETIREMENT = "retirement"
    EDUCATION = "education"
    OTHER = "other"

class Feasibility(str, enum.Enum):
    """Qualitative achievability tier of a goal. Ordered LOW < MEDIUM < HIGH."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return {"Low": 0, "Medium": 1, "High": 2}[self.value]

class InsightSource(str, enum.Enum):
    EXTERNAL = "external" # Narrative text came from the generative-language service
    FALLBACK = "fallback" # Deterministic template text

class SessionStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"

# Enum values are stored as plain strings so SQLite and Postgres behave the same
class EnumString(TypeDecorator):
    """Ensures Enum values are stored as strings."""
    impl = String
    cache_ok = True

    def __init__(self, enum_type, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.enum_type = enum_type

    def process_bind_param(self, value, dialect):
        if value is not None:
            return value.value
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return self.enum_type(value)
        return value
