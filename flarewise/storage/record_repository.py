"""
Record Repository - Symptom, medication, contact and symptom-type persistence.

Each collection is stored as one JSON document per profile, under the same
keys the browser client uses for its local storage.
"""

import csv
import io
import json
import logging
from datetime import date
from typing import List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..models.records import (
    DEFAULT_SYMPTOM_TYPES, EmergencyContact, MedicationRecord, Severity, SymptomRecord,
)
from .interface import StorageInterface

logger = logging.getLogger(__name__)

SYMPTOMS_KEY = "symptomEntries"
SYMPTOM_TYPES_KEY = "symptomTypes"
MEDICATIONS_KEY = "medicationEntries"
CONTACTS_KEY = "emergencyContacts"

M = TypeVar("M", bound=BaseModel)


class RecordRepository:
    """
    Typed access to one profile's stored records.
    """

    def __init__(self, storage: StorageInterface, profile: str = "default"):
        """
        Args:
            storage: Key-value storage backend
            profile: Profile directory name
        """
        self.storage = storage
        self.profile = profile

    def _path(self, key: str) -> str:
        return f"profiles/{self.profile}/{key}.json"

    async def _load_json(self, key: str):
        content = await self.storage.load(self._path(key))
        if content is None:
            return None
        try:
            return json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Failed to parse saved {key} for profile {self.profile}: {e}")
            return None

    async def _load_list(self, key: str, model: Type[M]) -> List[M]:
        raw = await self._load_json(key)
        if raw is None:
            return []
        try:
            return TypeAdapter(List[model]).validate_python(raw)
        except ValidationError as e:
            logger.error(f"Saved {key} for profile {self.profile} failed validation: {e}")
            return []

    async def _save_list(self, key: str, items: Sequence[BaseModel]) -> bool:
        payload = [item.model_dump(mode="json", by_alias=True) for item in items]
        return await self.storage.save(self._path(key), json.dumps(payload, ensure_ascii=False, indent=2))

    # Symptoms

    async def list_symptoms(self) -> List[SymptomRecord]:
        """All symptom records, ordered by date."""
        records = await self._load_list(SYMPTOMS_KEY, SymptomRecord)
        return sorted(records, key=lambda r: r.date)

    async def get_symptom(self, day: date) -> Optional[SymptomRecord]:
        for record in await self.list_symptoms():
            if record.date == day:
                return record
        return None

    async def save_symptom(self, record: SymptomRecord) -> SymptomRecord:
        """Insert a record, replacing any existing record for the same date."""
        records = [r for r in await self.list_symptoms() if r.date != record.date]
        records.append(record)
        await self._save_list(SYMPTOMS_KEY, sorted(records, key=lambda r: r.date))
        return record

    async def delete_symptom(self, record_id: str) -> bool:
        records = await self.list_symptoms()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        await self._save_list(SYMPTOMS_KEY, remaining)
        return True

    # Symptom types

    async def get_symptom_types(self) -> List[str]:
        """The user's ordered symptom names, or the defaults when unset."""
        raw = await self._load_json(SYMPTOM_TYPES_KEY)
        if not isinstance(raw, list) or not all(isinstance(t, str) for t in raw):
            return list(DEFAULT_SYMPTOM_TYPES)
        return raw

    async def set_symptom_types(self, types: Sequence[str]) -> List[str]:
        # Drop blanks and duplicates, keep order
        cleaned: List[str] = []
        for name in types:
            name = name.strip()
            if name and name not in cleaned:
                cleaned.append(name)
        await self.storage.save(self._path(SYMPTOM_TYPES_KEY), json.dumps(cleaned, ensure_ascii=False))
        return cleaned

    # Medications

    async def list_medications(self) -> List[MedicationRecord]:
        return await self._load_list(MEDICATIONS_KEY, MedicationRecord)

    async def get_medication(self, medication_id: str) -> Optional[MedicationRecord]:
        for record in await self.list_medications():
            if record.id == medication_id:
                return record
        return None

    async def save_medication(self, record: MedicationRecord) -> MedicationRecord:
        """Insert a medication, or replace the one with the same id in place."""
        records = await self.list_medications()
        for index, existing in enumerate(records):
            if existing.id == record.id:
                records[index] = record
                break
        else:
            records.append(record)
        await self._save_list(MEDICATIONS_KEY, records)
        return record

    async def delete_medication(self, medication_id: str) -> bool:
        records = await self.list_medications()
        remaining = [r for r in records if r.id != medication_id]
        if len(remaining) == len(records):
            return False
        await self._save_list(MEDICATIONS_KEY, remaining)
        return True

    async def medications_for_date(self, day: date) -> List[MedicationRecord]:
        return [m for m in await self.list_medications() if m.is_active_between(day, day)]

    # Emergency contacts

    async def list_contacts(self) -> List[EmergencyContact]:
        return await self._load_list(CONTACTS_KEY, EmergencyContact)

    async def save_contact(self, contact: EmergencyContact) -> EmergencyContact:
        records = await self.list_contacts()
        for index, existing in enumerate(records):
            if existing.id == contact.id:
                records[index] = contact
                break
        else:
            records.append(contact)
        if contact.is_primary:
            records = [r if r.id == contact.id else r.model_copy(update={"is_primary": False})
                       for r in records]
        await self._save_list(CONTACTS_KEY, records)
        return contact

    async def delete_contact(self, contact_id: str) -> bool:
        records = await self.list_contacts()
        remaining = [r for r in records if r.id != contact_id]
        if len(remaining) == len(records):
            return False
        await self._save_list(CONTACTS_KEY, remaining)
        return True

    async def set_primary_contact(self, contact_id: str) -> bool:
        """Mark one contact as primary and clear the flag on all others."""
        records = await self.list_contacts()
        if not any(r.id == contact_id for r in records):
            return False
        records = [r.model_copy(update={"is_primary": r.id == contact_id}) for r in records]
        await self._save_list(CONTACTS_KEY, records)
        return True


def export_symptoms_csv(
    records: Sequence[SymptomRecord],
    symptom_types: Sequence[str],
    medications: Sequence[MedicationRecord] = (),
) -> str:
    """
    Render symptom records as CSV.

    Columns: Date, Severity, Notes, one Yes/No column per symptom type,
    weather fields, and the medications active on that date.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(
        ["Date", "Severity", "Notes", *symptom_types,
         "Temperature", "Humidity", "Pressure", "UV Index", "Wind Speed",
         "Weather Description", "Medications"]
    )

    for record in sorted(records, key=lambda r: r.date):
        weather = record.weather
        active = [m for m in medications if m.is_active_between(record.date, record.date)]

        def _w(value):
            return "" if value is None else value

        writer.writerow([
            record.date.isoformat(),
            Severity(record.severity).label,
            record.notes,
            *("Yes" if record.symptoms.get(t) else "No" for t in symptom_types),
            _w(weather.temperature if weather else None),
            _w(weather.humidity if weather else None),
            _w(weather.pressure if weather else None),
            _w(weather.uv_index if weather else None),
            _w(weather.wind_speed if weather else None),
            _w(weather.description if weather else None),
            "; ".join(f"{m.name} ({m.dosage})" for m in active),
        ])

    return buffer.getvalue()
