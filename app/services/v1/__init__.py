# app/services/v1/__init__.py
from .session_context import *
from .security import *
from .identity_service import *
from .appointment_service import *
from .reminder_service import *
from .directory_service import *
