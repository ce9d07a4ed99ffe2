# backend/tests/conftest.py
#
# Shared fixtures: an in-memory stand-in for the document store so the scan
# flow can be exercised without DynamoDB.

import json
from typing import Any, Dict, List, Optional

import pytest

from backend.rxguard.errors import DocumentNotFound
from backend.rxguard.store import (
    APPOINTMENTS,
    AUDIT_LOGS,
    PRESCRIPTIONS,
    PRESCRIPTION_MEDICATIONS,
)


class FakeStore:
    """Minimal async document store keyed by collection and document id.

    Every call is recorded in `calls` so tests can assert what was (or was
    not) touched. Audit writes land in `created`.
    """

    def __init__(self, collections: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None, fail_writes: bool = False):
        self.collections = collections or {}
        self.fail_writes = fail_writes
        self.calls: List[tuple] = []
        self.created: List[tuple] = []

    async def get_document(self, collection: str, document_id: str) -> Dict[str, Any]:
        self.calls.append(("get", collection, document_id))
        docs = self.collections.get(collection, {})
        if document_id not in docs:
            raise DocumentNotFound(collection, document_id)
        return docs[document_id]

    async def list_documents(self, collection: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        self.calls.append(("list", collection, dict(filters)))
        return [
            doc for doc in self.collections.get(collection, {}).values()
            if all(doc.get(k) == v for k, v in filters.items())
        ]

    async def create_document(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("create", collection))
        if self.fail_writes:
            raise RuntimeError("audit store unavailable")
        self.created.append((collection, data))
        return data

    def reads(self) -> List[tuple]:
        return [c for c in self.calls if c[0] in ("get", "list")]

    def audit_records(self) -> List[Dict[str, Any]]:
        records = []
        for collection, data in self.created:
            if collection == AUDIT_LOGS:
                record = dict(data)
                record["metadata"] = json.loads(record["metadata"])
                records.append(record)
        return records


def clinic_data() -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Appointment A1 booked by u1, with prescription R1 holding two meds."""
    return {
        APPOINTMENTS: {
            "A1": {"appointmentId": "A1", "userId": "u1", "isFamilyBooking": False},
            "A2": {
                "appointmentId": "A2",
                "userId": "u1",
                "isFamilyBooking": True,
                "patientName": "Aisha",
                "primaryUserId": "u3",
            },
        },
        PRESCRIPTIONS: {
            "P1": {"prescriptionId": "P1", "appointmentId": "A1", "referenceCode": "R1", "status": "ACTIVE"},
            "P2": {"prescriptionId": "P2", "appointmentId": "A2", "referenceCode": "R2", "status": "ACTIVE"},
        },
        PRESCRIPTION_MEDICATIONS: {
            "M1": {
                "medicationId": "M1", "prescriptionId": "P1", "name": "Metformin", "type": "Tablet",
                "dosage": "500mg", "frequency": "Twice Daily", "duration": "30 days",
                "illnessType": "Diabetes", "notes": "With meals", "times": ["07:00"],
            },
            "M2": {
                "medicationId": "M2", "prescriptionId": "P1", "name": "Lisinopril", "type": "Tablet",
                "dosage": "10mg", "frequency": "Twice Daily", "duration": "30 days",
                "illnessType": "Hypertension", "notes": "", "times": "[\"bogus\"]",
            },
            "M3": {
                "medicationId": "M3", "prescriptionId": "P2", "name": "Amoxicillin", "type": "Capsule",
                "dosage": "250mg", "frequencies": "Three times Daily", "duration": "7 days",
                "illness_type": "Infection",
            },
        },
    }


@pytest.fixture
def store() -> FakeStore:
    return FakeStore(clinic_data())


@pytest.fixture
def broken_audit_store() -> FakeStore:
    return FakeStore(clinic_data(), fail_writes=True)
