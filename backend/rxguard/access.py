# rxguard/access.py
#
# Decides whether a scanning user may see the prescription attached to an
# appointment. Only exact identity equality authorizes, and any error while
# evaluating the policy is treated as a denial.

from typing import Optional

from .models import ActorContext, Appointment

DIRECT_OWNER = "direct_owner"
FAMILY_BOOKING_OWNER = "family_booking_owner"
PRIMARY_USER = "primary_user"


def _same_identity(left: Optional[str], right: Optional[str]) -> bool:
    if not isinstance(left, str) or not isinstance(right, str):
        return False
    return bool(left) and left == right


def authorization_reason(appointment: Appointment, actor: ActorContext) -> Optional[str]:
    """
    Returns the name of the first policy rule that grants access, or None.

    Rules are checked in order: direct booking owner, family booking made by
    the account holder, then the appointment's declared primary user.
    """
    if _same_identity(appointment.user_id, actor.user_id):
        return DIRECT_OWNER
    # Family bookings authorize the account holder only, same as rule 1.
    if appointment.is_family_booking and _same_identity(appointment.user_id, actor.user_id):
        return FAMILY_BOOKING_OWNER
    if appointment.primary_user_id is not None and _same_identity(appointment.primary_user_id, actor.user_id):
        return PRIMARY_USER
    return None


def authorize(appointment: Appointment, actor: ActorContext) -> bool:
    """Fail-closed wrapper around authorization_reason."""
    try:
        reason = authorization_reason(appointment, actor)
    except Exception as e:
        print(f"ACCESS: Policy evaluation failed, denying access: {e}")
        return False

    if reason is None:
        print(f"ACCESS: Denied for user {getattr(actor, 'user_id', None)}")
        return False

    print(f"ACCESS: Granted for user {actor.user_id} on appointment {appointment.appointment_id} ({reason})")
    return True
