# app/db/schemas/doctor_schema.py
from pydantic import BaseModel, Field, ConfigDict, computed_field
from typing import Optional


class DoctorBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: str
    specialty: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, max_length=30)


class DoctorResponse(DoctorBase):
    model_config = ConfigDict(from_attributes=True)

    id: str

    @computed_field
    @property
    def display_name(self) -> str:
        """Picker label, e.g. "Grey (Surgery)"."""
        return f"{self.name} ({self.specialty})" if self.specialty else self.name


__all__ = ["DoctorResponse"]
