# rxguard/models.py
#
# This module contains the Pydantic models used by the QR authorization flow,
# plus the small normalization helpers that map loosely-typed store records
# (with their historical field names) onto one canonical shape.

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any, Union, Literal, Mapping, Iterable, Annotated

from pydantic import BaseModel, Field


def _first_present(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    """Returns the first non-empty value found under any of `keys`."""
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _text(record: Mapping[str, Any], keys: Iterable[str]) -> Optional[str]:
    """Like _first_present, but as text. DynamoDB hands numbers back as Decimal."""
    value = _first_present(record, keys)
    return str(value) if value is not None else None


def _flag(record: Mapping[str, Any], keys: Iterable[str]) -> bool:
    value = _first_present(record, keys)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


class AuditAction(str, Enum):
    INVALID_QR_FORMAT = "INVALID_QR_FORMAT"
    APPOINTMENT_NOT_FOUND = "APPOINTMENT_NOT_FOUND"
    UNAUTHORIZED_QR_SCAN_ATTEMPT = "UNAUTHORIZED_QR_SCAN_ATTEMPT"
    NO_PRESCRIPTION_FOUND = "NO_PRESCRIPTION_FOUND"
    INVALID_REFERENCE_CODE = "INVALID_REFERENCE_CODE"
    NO_MEDICATIONS_FOUND = "NO_MEDICATIONS_FOUND"
    QR_SCAN_ERROR = "QR_SCAN_ERROR"
    QR_SCAN_SUCCESS = "QR_SCAN_SUCCESS"


class AuditSeverity(str, Enum):
    INFO = "INFO"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


# --- Scan requests ---

class DemoScan(BaseModel):
    kind: Literal["demo"] = "demo"
    raw_payload: str
    demo_category: str
    reference_code: Optional[str] = None


class AppointmentScan(BaseModel):
    kind: Literal["appointment"] = "appointment"
    raw_payload: str
    appointment_id: str
    reference_code: str


ScanRequest = Annotated[Union[DemoScan, AppointmentScan], Field(discriminator="kind")]


# --- Identities and records read from the store ---

# Historical session shapes stored the account id under different names.
SESSION_ID_FIELDS = ("uid", "userId", "$id")


class ActorContext(BaseModel):
    user_id: str

    @classmethod
    def from_session(cls, session: Optional[Mapping[str, Any]]) -> Optional["ActorContext"]:
        if not session:
            return None
        user_id = _first_present(session, SESSION_ID_FIELDS)
        if user_id is None:
            return None
        return cls(user_id=str(user_id))


class Appointment(BaseModel):
    appointment_id: str
    user_id: Optional[str] = None
    is_family_booking: bool = False
    patient_name: Optional[str] = None
    primary_user_id: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Appointment":
        return cls(
            appointment_id=_text(doc, ("appointmentId", "$id", "id")) or "",
            user_id=_text(doc, ("userId", "user_id")),
            is_family_booking=_flag(doc, ("isFamilyBooking", "is_family_booking")),
            patient_name=_text(doc, ("patientName", "patient_name")),
            primary_user_id=_text(doc, ("primaryUserId", "primary_user_id")),
        )


class Prescription(BaseModel):
    prescription_id: str
    appointment_id: Optional[str] = None
    reference_code: Optional[str] = None
    status: Optional[str] = None
    issued_date: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Prescription":
        return cls(
            prescription_id=_text(doc, ("prescriptionId", "$id", "id")) or "",
            appointment_id=_text(doc, ("appointmentId", "appointment_id")),
            reference_code=_text(doc, ("referenceCode", "reference_code")),
            status=_text(doc, ("status",)),
            issued_date=_text(doc, ("issuedDate", "issued_date")),
        )


class Medication(BaseModel):
    medication_id: Optional[str] = None
    name: str = ""
    type: str = ""
    dosage: str = ""
    frequency: str = ""
    duration: str = ""
    illness_type: str = ""
    notes: str = ""
    # Stored `times` is deliberately not part of this model.

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Medication":
        def text(*keys: str) -> str:
            return _text(doc, keys) or ""

        return cls(
            medication_id=text("medicationId", "$id", "id") or None,
            name=text("name"),
            type=text("type"),
            dosage=text("dosage"),
            frequency=text("frequency", "frequencies"),
            duration=text("duration"),
            illness_type=text("illnessType", "illness_type"),
            notes=text("notes"),
        )


# --- Responses ---

class MedicationResponse(BaseModel):
    name: str
    type: str
    dosage: str
    frequency: str
    duration: str
    illnessType: str = ""
    notes: str = ""
    times: List[str]
    appointmentId: str
    referenceCode: Optional[str] = None
    prescriptionId: Optional[str] = None
    medicationId: Optional[str] = None
    verifiedAccess: bool = False


class QRScanRequest(BaseModel):
    qrData: str


class QRScanResponse(BaseModel):
    medications: List[MedicationResponse]
    count: int
    demo: bool = False


# --- Audit ---

class AuditEvent(BaseModel):
    actor_user_id: str
    appointment_id: str
    action: AuditAction
    severity: AuditSeverity
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    source_tag: str

    def to_document(self, user_agent: str, ip: str) -> Dict[str, Any]:
        """Shape persisted to the AuditLogs collection."""
        return {
            "action": self.action.value,
            "userId": self.actor_user_id,
            "timestamp": self.timestamp,
            "userAgent": user_agent,
            "ip": ip,
            "metadata": json.dumps({
                "appointment_id": self.appointment_id,
                "severity": self.severity.value,
                "source": self.source_tag,
            }),
        }
