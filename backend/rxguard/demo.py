# rxguard/demo.py
#
# Fixed medication sets returned for DEMO: codes. These exist so the scanner
# can be demonstrated without a real prescription; they never touch the store
# and are always marked verifiedAccess=False.

from typing import Dict, List, Optional, Tuple

from .frequencies import lookup_times
from .models import MedicationResponse

DEMO_APPOINTMENT_ID = "demo"

# (name, type, dosage, frequency, duration, illness type, notes)
_DemoEntry = Tuple[str, str, str, str, str, str, str]

DEMO_MEDICATIONS: Dict[str, List[_DemoEntry]] = {
    "blood_pressure": [
        ("Amlodipine", "Tablet", "10mg", "Once Daily", "30 days", "Blood Pressure",
         "Take in the morning with food"),
    ],
    "diabetes": [
        ("Metformin", "Tablet", "500mg", "Twice Daily", "30 days", "Diabetes",
         "Take with meals to reduce stomach upset"),
        ("Glimepiride", "Tablet", "2mg", "Every Morning", "30 days", "Diabetes",
         "Take with breakfast"),
    ],
    "infection": [
        ("Amoxicillin", "Capsule", "500mg", "Three times Daily", "7 days", "Infection",
         "Complete the full course even if you feel better"),
    ],
    "cholesterol": [
        ("Atorvastatin", "Tablet", "20mg", "Every Evening", "90 days", "Cholesterol",
         "Take in the evening"),
    ],
}

DEFAULT_DEMO_MEDICATION: _DemoEntry = (
    "Generic Medication", "Tablet", "100mg", "Once Daily", "30 days", "General",
    "This is a placeholder medication. Please consult your doctor for details.",
)


def demo_medications(category: str, reference_code: Optional[str] = None) -> List[MedicationResponse]:
    entries = DEMO_MEDICATIONS.get((category or "").lower(), [DEFAULT_DEMO_MEDICATION])
    return [
        MedicationResponse(
            name=name,
            type=med_type,
            dosage=dosage,
            frequency=frequency,
            duration=duration,
            illnessType=illness_type,
            notes=notes,
            times=lookup_times(frequency),
            appointmentId=DEMO_APPOINTMENT_ID,
            referenceCode=reference_code,
            verifiedAccess=False,
        )
        for name, med_type, dosage, frequency, duration, illness_type, notes in entries
    ]
