# rxguard/qr.py
#
# Decodes the colon-delimited text carried by a prescription QR code.
#
#   Real:  APPT:<appointmentId>:<referenceCode>
#   Demo:  DEMO:<category>:<cosmeticCode>
#
# Decoding is pure: no store access, no audit. The orchestrator decides what
# to record when a payload is rejected.

from .errors import MalformedPayload
from .models import AppointmentScan, DemoScan, ScanRequest

DEMO_PREFIX = "DEMO:"
APPOINTMENT_TAG = "APPT"
SEPARATOR = ":"


def decode(raw_payload: str) -> ScanRequest:
    """Parses scanned text into a DemoScan or an AppointmentScan.

    Raises MalformedPayload when the text matches neither format.
    """
    if not isinstance(raw_payload, str):
        raise MalformedPayload("QR payload is not text")

    payload = raw_payload.strip()

    if payload.startswith(DEMO_PREFIX):
        parts = payload.split(SEPARATOR)
        return DemoScan(
            raw_payload=raw_payload,
            demo_category=parts[1].strip().lower(),
            reference_code=parts[2] if len(parts) > 2 and parts[2] else None,
        )

    parts = payload.split(SEPARATOR)
    if len(parts) < 3 or parts[0] != APPOINTMENT_TAG:
        raise MalformedPayload(f"Expected {APPOINTMENT_TAG}:appointmentId:referenceCode")

    appointment_id, reference_code = parts[1], parts[2]
    if not appointment_id or not reference_code:
        raise MalformedPayload("Appointment id and reference code must both be present")

    return AppointmentScan(
        raw_payload=raw_payload,
        appointment_id=appointment_id,
        reference_code=reference_code,
    )


def encode_appointment_payload(appointment_id: str, reference_code: str) -> str:
    """Builds the text a prescriber's QR code carries for an appointment."""
    if not appointment_id or not reference_code:
        raise ValueError("appointment_id and reference_code are required")
    if SEPARATOR in appointment_id or SEPARATOR in reference_code:
        raise ValueError(f"QR fields may not contain '{SEPARATOR}'")
    return SEPARATOR.join((APPOINTMENT_TAG, appointment_id, reference_code))
