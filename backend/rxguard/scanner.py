# rxguard/scanner.py
#
# End-to-end handling of a scanned prescription QR code:
#
#   decode -> (demo short-circuit) -> fetch appointment -> authorize
#          -> resolve prescription -> audit -> medications
#
# Every rejection is audited (except a missing login, which has no actor to
# record) and re-raised with a user-readable message attached.

from typing import Any, Dict, List, Optional, Type

from . import qr
from .access import authorize
from .audit import AuditLogger
from .demo import demo_medications
from .errors import (
    AccessDenied,
    AppointmentNotFound,
    InvalidReferenceCode,
    MalformedPayload,
    NoMedicationsFound,
    NoPrescriptionFound,
    NotLoggedIn,
    ScanError,
    StorageUnavailable,
)
from .models import ActorContext, AuditAction, AuditSeverity, DemoScan, MedicationResponse
from .resolver import PrescriptionResolver

UNKNOWN_APPOINTMENT = "UNKNOWN"

USER_MESSAGES: Dict[Type[ScanError], str] = {
    NotLoggedIn: "Please log in to scan a prescription.",
    MalformedPayload: "This QR code is not a valid prescription code. Please scan again.",
    AppointmentNotFound: "We could not find the appointment for this prescription. Please rescan or contact your healthcare provider.",
    # Identical for every ownership failure so it cannot be used to probe other patients' appointments.
    AccessDenied: "You are not authorized to view this prescription.",
    NoPrescriptionFound: "No prescription has been issued for this appointment yet. Please contact your healthcare provider.",
    InvalidReferenceCode: "This prescription code is no longer valid. Please contact your healthcare provider.",
    NoMedicationsFound: "This prescription has no medications. Please contact your healthcare provider.",
    StorageUnavailable: "The prescription service is temporarily unavailable. Please try again later.",
}


def user_message_for(error: ScanError) -> str:
    return USER_MESSAGES.get(type(error), "Unable to process prescription data. Please try again.")


def _reject(error: ScanError) -> ScanError:
    error.user_message = user_message_for(error)
    return error


async def process_prescription_qr(
    raw_payload: str,
    actor: Optional[ActorContext],
    store: Any,
    audit_logger: Optional[AuditLogger] = None,
) -> List[MedicationResponse]:
    """
    Decides whether `actor` may see the prescription behind `raw_payload` and
    returns its medications.

    Raises a ScanError subclass (with `user_message` set) on any rejection.
    No partial medication list is ever returned.
    """
    if actor is None or not actor.user_id:
        raise _reject(NotLoggedIn("No user session available"))

    audit = audit_logger or AuditLogger(store)
    user_id = actor.user_id

    try:
        request = qr.decode(raw_payload)
    except MalformedPayload as e:
        print(f"QR Scan: Rejected malformed payload from user {user_id}")
        await audit.record(user_id, UNKNOWN_APPOINTMENT, e.audit_action, e.severity)
        raise _reject(e)

    if isinstance(request, DemoScan):
        print(f"QR Scan: Demo code '{request.demo_category}' scanned by user {user_id}")
        return demo_medications(request.demo_category, request.reference_code)

    appointment_id = request.appointment_id
    resolver = PrescriptionResolver(store)
    print(f"QR Scan: User {user_id} scanned appointment {appointment_id}")

    try:
        appointment = await resolver.fetch_appointment(appointment_id)

        # Nothing about the prescription is read before this check.
        if not authorize(appointment, actor):
            raise AccessDenied(f"User {user_id} does not own appointment {appointment_id}")

        medications = await resolver.resolve(appointment_id, request.reference_code, appointment=appointment)
    except ScanError as e:
        print(f"QR Scan: Rejected ({type(e).__name__}) for user {user_id}: {e.detail}")
        await audit.record(user_id, appointment_id, e.audit_action, e.severity)
        raise _reject(e)
    except Exception as e:
        print(f"QR Scan: Storage error for user {user_id} on appointment {appointment_id}: {e}")
        error = StorageUnavailable(str(e))
        await audit.record(user_id, appointment_id, error.audit_action, error.severity)
        raise _reject(error) from e

    await audit.record(user_id, appointment_id, AuditAction.QR_SCAN_SUCCESS, AuditSeverity.INFO)
    print(f"QR Scan: Returned {len(medications)} medication(s) to user {user_id}")
    return medications
