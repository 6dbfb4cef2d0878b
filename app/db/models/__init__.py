# app/db/models/__init__.py
from .db_base_model import *
from .user_table import *
from .auth_session_table import *
from .doctor_table import *
from .patient_table import *
from .appointment_table import *
from .reminder_table import *
