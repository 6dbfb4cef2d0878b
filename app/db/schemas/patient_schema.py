# app/db/schemas/patient_schema.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date
from typing import Optional


class PatientBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: str
    phone: Optional[str] = Field(None, max_length=30)
    date_of_birth: Optional[date] = None


class PatientResponse(PatientBase):
    model_config = ConfigDict(
        from_attributes=True
    )  # Tells Pydantic to read SQLAlchemy objects

    id: str


__all__ = ["PatientResponse"]
