# app/db/schemas/__init__.py
from .user_schemas import *
from .doctor_schema import *
from .patient_schema import *
from .appointment_schemas import *
from .reminder_schemas import *
