# seed_db.py
"""
Database Seeding Script
=======================

Seeds a migrated database with demo accounts, appointments and reminders.
Everything goes through the same services the API uses, so passwords are
hashed, profiles are created and reminders start out pending.

Usage:
    python seed_db.py demo --doctors 3 --patients 10
    python seed_db.py demo --doctors 2 --patients 4 --appointments 3 --export-csv

Requirements:
    - A valid database configuration (via environment variables or .env).
    - Migrations applied (alembic upgrade head).
"""

import argparse
import asyncio
import csv
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from app.core import AppointmentStatus, RecipientType, ReminderChannel, Role
from app.db import DbManager
from app.db.schemas import AppointmentCreate, AppointmentUpdate, ReminderCreate, UserIdentity
from app.services.v1 import (
    AppointmentService,
    IdentityService,
    ReminderService,
    SessionContext,
)
from common.api_error import ConfigurationError
from common.config import AppConfig, get_config, initialize_config
from common.logger import get_app_logger

logger = get_app_logger("seed_db")

DEMO_PASSWORD = "demo-password"

SPECIALTIES = ("Cardiology", "Dermatology", "General Practice", "Pediatrics")
SLOTS = ("09:00", "10:30", "13:15", "15:45")

DOCTOR_TEMPLATE: dict[str, Any] = {"name": "Doctor", "email": "doctor{n}@example.com"}
PATIENT_TEMPLATE: dict[str, Any] = {"name": "Patient", "email": "patient{n}@example.com"}


def write_accounts_to_csv(filename: str, accounts: list[UserIdentity], password: str) -> None:
    """Write seeded sign-in credentials to CSV."""
    if not accounts:
        return

    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["id", "email", "name", "role", "password"])
        writer.writeheader()
        for account in accounts:
            writer.writerow({**account.model_dump(mode="json"), "password": password})


async def _register_many(
    identity: IdentityService,
    template: dict[str, Any],
    role: Role,
    count: int,
    password: str,
) -> list[UserIdentity]:
    accounts: list[UserIdentity] = []
    for n in range(1, count + 1):
        result = await identity.register(
            template["email"].format(n=n),
            password,
            role=role,
            name=f"{template['name']} {n}",
        )
        if result.success and result.user is not None:
            accounts.append(result.user)
        else:
            logger.warning("Skipping account", email=template["email"].format(n=n), error=result.error)
    return accounts


async def seed_demo(
    db_manager: DbManager,
    config: AppConfig,
    doctors: int,
    patients: int,
    appointments_per_patient: int,
    password: str = DEMO_PASSWORD,
) -> list[UserIdentity]:
    """
    Register doctors and patients, then book appointments round-robin with
    one reminder each. Every third appointment is marked completed so the
    status tabs have something to show.

    Returns:
        The accounts that were created
    """
    context = SessionContext()
    async with db_manager.session() as session:
        identity = IdentityService(session, context, config.auth)
        appointment_service = AppointmentService(session)
        reminder_service = ReminderService(session)

        doctor_accounts = await _register_many(
            identity, DOCTOR_TEMPLATE, Role.DOCTOR, doctors, password
        )
        patient_accounts = await _register_many(
            identity, PATIENT_TEMPLATE, Role.PATIENT, patients, password
        )
        if not doctor_accounts or not patient_accounts:
            logger.warning("Nothing to book, need at least one doctor and one patient")
            return doctor_accounts + patient_accounts

        booked = 0
        today = date.today()
        for p_index, patient in enumerate(patient_accounts):
            for a_index in range(appointments_per_patient):
                doctor = doctor_accounts[(p_index + a_index) % len(doctor_accounts)]
                result = await appointment_service.create_appointment(
                    AppointmentCreate(
                        doctor_id=doctor.id,
                        patient_id=patient.id,
                        date=today + timedelta(days=a_index * 2 - 1),
                        time=SLOTS[(p_index + a_index) % len(SLOTS)],
                        notes=f"{SPECIALTIES[a_index % len(SPECIALTIES)]} follow-up",
                    )
                )
                appointment = result.unwrap()
                if appointment is None:
                    continue
                booked += 1

                await reminder_service.create_reminder(
                    ReminderCreate(
                        appointment_id=appointment.id,
                        type=ReminderChannel.EMAIL if a_index % 2 else ReminderChannel.SMS,
                        time_before=1440 if a_index % 2 else 60,
                        message="Hi {patient_name}, see Dr. {doctor_name} on {date} at {time}.",
                        recipient_type=RecipientType.PATIENT,
                    )
                )

                if booked % 3 == 0:
                    await appointment_service.update_appointment(
                        appointment.id, AppointmentUpdate(status=AppointmentStatus.COMPLETED)
                    )

    context.close()
    logger.info(
        "Seeding finished",
        doctors=len(doctor_accounts),
        patients=len(patient_accounts),
        appointments=booked,
    )
    return doctor_accounts + patient_accounts


async def run_seed_demo(
    config: AppConfig,
    doctors: int,
    patients: int,
    appointments: int,
    export_csv: bool,
    csv_dir: str,
):
    if config.database is None:
        raise RuntimeError("Database configuration required")

    db_manager = DbManager.from_config(config.database)
    await db_manager.verify_connection()
    await db_manager.verify_migrations_current()
    try:
        accounts = await seed_demo(db_manager, config, doctors, patients, appointments)
    finally:
        await db_manager.dispose()

    if export_csv:
        target = Path(csv_dir) / "accounts.csv"
        write_accounts_to_csv(str(target), accounts, DEMO_PASSWORD)
        logger.info("Credentials exported", path=str(target))


def main():
    """
    CLI entry point for database seeding.

    Example:
        python seed_db.py demo --doctors 3 --patients 10 --export-csv
    """
    parser = argparse.ArgumentParser(description="Seed the scheduling database")
    subparsers = parser.add_subparsers(dest="mode", required=True)

    demo_parser = subparsers.add_parser("demo", help="Seed demo accounts and bookings")
    demo_parser.add_argument("--doctors", type=int, default=3, help="Doctor accounts to create")
    demo_parser.add_argument("--patients", type=int, default=10, help="Patient accounts to create")
    demo_parser.add_argument(
        "--appointments",
        type=int,
        default=2,
        help="Appointments to book per patient",
    )
    demo_parser.add_argument(
        "--export-csv", action="store_true", help="Export seeded credentials to CSV"
    )
    demo_parser.add_argument(
        "--csv-dir", type=str, default="data/seed", help="Directory to export CSV files"
    )

    args = parser.parse_args()

    if args.mode == "demo":
        asyncio.run(
            run_seed_demo(
                get_config(),
                args.doctors,
                args.patients,
                args.appointments,
                args.export_csv,
                args.csv_dir,
            )
        )


if __name__ == "__main__":
    try:
        load_dotenv()
        initialize_config()
    except ConfigurationError as e:
        print(f"FATAL: Configuration error:\n{e}")
        sys.exit(1)
    main()
