# rxguard/errors.py
#
# Failure kinds raised by the QR authorization flow. Each kind knows which
# audit action and severity it is recorded under; the user-facing wording is
# attached by the orchestrator (see scanner.py), never by the lower layers.

from typing import Optional

from .models import AuditAction, AuditSeverity


class DocumentNotFound(Exception):
    """Raised by a document store when the requested id does not exist."""

    def __init__(self, collection: str, document_id: str):
        super().__init__(f"{collection}/{document_id} not found")
        self.collection = collection
        self.document_id = document_id


class AuditLoggingFailure(Exception):
    """Raised inside the audit logger only; it never reaches callers."""


class ScanError(Exception):
    audit_action: Optional[AuditAction] = None
    severity: Optional[AuditSeverity] = None

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.__class__.__name__)
        self.detail = detail
        self.user_message: Optional[str] = None


class NotLoggedIn(ScanError):
    pass


class MalformedPayload(ScanError):
    audit_action = AuditAction.INVALID_QR_FORMAT
    severity = AuditSeverity.MEDIUM


class AppointmentNotFound(ScanError):
    audit_action = AuditAction.APPOINTMENT_NOT_FOUND
    severity = AuditSeverity.HIGH


class AccessDenied(ScanError):
    audit_action = AuditAction.UNAUTHORIZED_QR_SCAN_ATTEMPT
    severity = AuditSeverity.CRITICAL


class NoPrescriptionFound(ScanError):
    audit_action = AuditAction.NO_PRESCRIPTION_FOUND
    severity = AuditSeverity.MEDIUM


class InvalidReferenceCode(ScanError):
    audit_action = AuditAction.INVALID_REFERENCE_CODE
    severity = AuditSeverity.HIGH


class NoMedicationsFound(ScanError):
    audit_action = AuditAction.NO_MEDICATIONS_FOUND
    severity = AuditSeverity.MEDIUM


class StorageUnavailable(ScanError):
    """Wraps unexpected document store errors so they never leak raw."""
    audit_action = AuditAction.QR_SCAN_ERROR
    severity = AuditSeverity.HIGH
