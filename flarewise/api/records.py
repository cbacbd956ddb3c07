"""
Records API endpoints - symptoms, medications, emergency contacts and symptom types.
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from ..models import EmergencyContact, MedicationRecord, SymptomRecord
from ..services import ReminderScheduler
from ..storage import RecordRepository, export_symptoms_csv
from .deps import get_repository, get_scheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["records"])


def _not_found(kind: str, key: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} not found: {key}")


# Symptoms

@router.get("/symptoms", response_model=List[SymptomRecord])
async def list_symptoms(repo: RecordRepository = Depends(get_repository)):
    return await repo.list_symptoms()


@router.get("/symptoms/export", response_class=PlainTextResponse)
async def export_symptoms(
    month: Optional[str] = Query(default=None, pattern=r"^\d{4}-\d{2}$"),
    repo: RecordRepository = Depends(get_repository),
):
    """
    Download symptom records as CSV.

    Args:
        month: Optional YYYY-MM; only that month's entries are exported
    """
    records = await repo.list_symptoms()
    if month:
        records = [r for r in records if r.date.isoformat().startswith(month)]
    csv_text = export_symptoms_csv(records, await repo.get_symptom_types(), await repo.list_medications())
    filename = f"health-tracker-{month or date.today().isoformat()}.csv"
    return PlainTextResponse(
        csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/symptoms/{day}", response_model=SymptomRecord)
async def get_symptom(day: date, repo: RecordRepository = Depends(get_repository)):
    record = await repo.get_symptom(day)
    if record is None:
        raise _not_found("Symptom entry", day.isoformat())
    return record


@router.post("/symptoms", response_model=SymptomRecord, status_code=status.HTTP_201_CREATED)
async def save_symptom(record: SymptomRecord, repo: RecordRepository = Depends(get_repository)):
    """Save a day's entry; an existing entry for the same date is replaced."""
    return await repo.save_symptom(record)


@router.delete("/symptoms/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_symptom(record_id: str, repo: RecordRepository = Depends(get_repository)):
    if not await repo.delete_symptom(record_id):
        raise _not_found("Symptom entry", record_id)


# Symptom types

@router.get("/symptom-types", response_model=List[str])
async def get_symptom_types(repo: RecordRepository = Depends(get_repository)):
    return await repo.get_symptom_types()


@router.put("/symptom-types", response_model=List[str])
async def set_symptom_types(types: List[str], repo: RecordRepository = Depends(get_repository)):
    return await repo.set_symptom_types(types)


# Medications

@router.get("/medications", response_model=List[MedicationRecord])
async def list_medications(repo: RecordRepository = Depends(get_repository)):
    return await repo.list_medications()


@router.post("/medications", response_model=MedicationRecord, status_code=status.HTTP_201_CREATED)
async def save_medication(
    record: MedicationRecord,
    repo: RecordRepository = Depends(get_repository),
    scheduler: ReminderScheduler = Depends(get_scheduler),
):
    """Create or update a medication and reschedule its reminders."""
    saved = await repo.save_medication(record)
    scheduler.sync(saved)
    return saved


@router.delete("/medications/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medication(
    medication_id: str,
    repo: RecordRepository = Depends(get_repository),
    scheduler: ReminderScheduler = Depends(get_scheduler),
):
    if not await repo.delete_medication(medication_id):
        raise _not_found("Medication", medication_id)
    scheduler.cancel(medication_id)


# Emergency contacts

@router.get("/contacts", response_model=List[EmergencyContact])
async def list_contacts(repo: RecordRepository = Depends(get_repository)):
    return await repo.list_contacts()


@router.post("/contacts", response_model=EmergencyContact, status_code=status.HTTP_201_CREATED)
async def save_contact(contact: EmergencyContact, repo: RecordRepository = Depends(get_repository)):
    return await repo.save_contact(contact)


@router.post("/contacts/{contact_id}/primary")
async def set_primary_contact(contact_id: str, repo: RecordRepository = Depends(get_repository)):
    if not await repo.set_primary_contact(contact_id):
        raise _not_found("Contact", contact_id)
    return {"success": True, "primary": contact_id}


@router.delete("/contacts/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(contact_id: str, repo: RecordRepository = Depends(get_repository)):
    if not await repo.delete_contact(contact_id):
        raise _not_found("Contact", contact_id)
