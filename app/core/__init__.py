# app/core/__init__.py
"""Pure scheduling logic: no I/O, no framework imports."""

from .enums import *
from .roles import *
from .appointment_filters import *
from .reminder_aggregation import *
from .results import *
