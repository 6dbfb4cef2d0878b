# app/api/v1/directory_router.py
from fastapi import APIRouter, Depends

from app.db.schemas import DoctorResponse, PatientResponse, UserIdentity
from app.services.v1 import DirectoryService
from .deps import get_current_user, get_directory_service

directory_router = APIRouter(tags=["Directory"])


@directory_router.get(
    "/doctors",
    response_model=list[DoctorResponse],
    summary="List doctors",
    description="Every doctor, for the patient's appointment form.",
)
async def list_doctors(
    _: UserIdentity = Depends(get_current_user),
    directory: DirectoryService = Depends(get_directory_service),
):
    return (await directory.list_doctors()).unwrap()


@directory_router.get(
    "/patients",
    response_model=list[PatientResponse],
    summary="List patients",
    description="Every patient, for the doctor's appointment form.",
)
async def list_patients(
    _: UserIdentity = Depends(get_current_user),
    directory: DirectoryService = Depends(get_directory_service),
):
    return (await directory.list_patients()).unwrap()


__all__ = ["directory_router"]
