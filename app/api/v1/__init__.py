# app/api/v1/__init__.py
from .auth_router import *
from .directory_router import *
from .appointment_router import *
from .reminder_router import *

routers = [auth_router, directory_router, appointment_router, reminder_router]
