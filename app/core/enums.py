# app/core/enums.py
from enum import Enum


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"  # Booked, default on creation
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReminderChannel(str, Enum):
    SMS = "sms"
    WHATSAPP = "whatsapp"
    EMAIL = "email"

    @property
    def label(self) -> str:
        return {"sms": "SMS", "whatsapp": "WhatsApp", "email": "Email"}[self.value]


class ReminderStatus(str, Enum):
    # pending -> sent | failed, written by the delivery process
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class RecipientType(str, Enum):
    DOCTOR = "doctor"
    PATIENT = "patient"
    BOTH = "both"


ALL = "all"

__all__ = [
    "AppointmentStatus",
    "ReminderChannel",
    "ReminderStatus",
    "RecipientType",
    "ALL",
]
