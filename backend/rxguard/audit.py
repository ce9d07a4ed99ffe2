# rxguard/audit.py
#
# Best-effort audit trail for QR authorization decisions. Writing an audit
# record can never change the outcome of a scan: persistence errors are routed
# to a fallback diagnostic sink and swallowed.

import os
import sys
from typing import Any, Callable

from .errors import AuditLoggingFailure
from .models import AuditAction, AuditEvent, AuditSeverity
from .store import AUDIT_LOGS

# --- Configuration ---
AUDIT_SOURCE_TAG = os.getenv("AUDIT_SOURCE_TAG", "qr_scanner")
AUDIT_USER_AGENT = "mobile-app"
AUDIT_IP = "unknown"


def print_to_stderr(message: str) -> None:
    print(message, file=sys.stderr)


class AuditLogger:
    def __init__(
        self,
        store: Any,
        fallback: Callable[[str], None] = print_to_stderr,
        source_tag: str = AUDIT_SOURCE_TAG,
    ):
        self.store = store
        self.fallback = fallback
        self.source_tag = source_tag

    async def record(
        self,
        actor_user_id: str,
        appointment_id: str,
        action: AuditAction,
        severity: AuditSeverity,
    ) -> None:
        """Persists one audit event. Never raises."""
        try:
            event = AuditEvent(
                actor_user_id=actor_user_id,
                appointment_id=appointment_id,
                action=action,
                severity=severity,
                source_tag=self.source_tag,
            )
            try:
                await self.store.create_document(AUDIT_LOGS, event.to_document(AUDIT_USER_AGENT, AUDIT_IP))
            except Exception as e:
                raise AuditLoggingFailure(str(e)) from e
            print(f"AUDIT: {event.action.value} ({event.severity.value}) user={actor_user_id} appointment={appointment_id}")
        except Exception as e:
            self._report(e, actor_user_id, appointment_id, action, severity)

    def _report(self, error, actor_user_id, appointment_id, action, severity) -> None:
        try:
            self.fallback(
                f"AUDIT FALLBACK: could not persist {getattr(action, 'value', action)} "
                f"({getattr(severity, 'value', severity)}) user={actor_user_id} "
                f"appointment={appointment_id}: {error!r}"
            )
        except Exception:
            # The diagnostic sink itself is broken; nothing left to report to.
            pass
