# rxguard/resolver.py
#
# Looks up the prescription and medications behind an appointment once the
# scanning user has been authorized for it.

from typing import Any, List, Optional

from .errors import (
    AppointmentNotFound,
    DocumentNotFound,
    InvalidReferenceCode,
    NoMedicationsFound,
    NoPrescriptionFound,
)
from .frequencies import lookup_times
from .models import Appointment, Medication, MedicationResponse, Prescription
from .store import APPOINTMENTS, PRESCRIPTIONS, PRESCRIPTION_MEDICATIONS


class PrescriptionResolver:
    def __init__(self, store: Any):
        self.store = store

    async def fetch_appointment(self, appointment_id: str) -> Appointment:
        try:
            doc = await self.store.get_document(APPOINTMENTS, appointment_id)
        except DocumentNotFound:
            raise AppointmentNotFound(f"Appointment {appointment_id} does not exist")
        return Appointment.from_document(doc)

    async def resolve(
        self,
        appointment_id: str,
        reference_code: str,
        appointment: Optional[Appointment] = None,
    ) -> List[MedicationResponse]:
        """
        Returns the medications of the prescription whose reference code
        exactly matches `reference_code`.

        Must only be called after the caller has been authorized for the
        appointment. `appointment` may be passed when it was already fetched.
        """
        if appointment is None:
            appointment = await self.fetch_appointment(appointment_id)

        prescription_docs = await self.store.list_documents(PRESCRIPTIONS, {'appointmentId': appointment_id})
        if not prescription_docs:
            raise NoPrescriptionFound(f"No prescription for appointment {appointment_id}")

        # Reissued prescriptions share an appointment; only the exact code selects one.
        prescription = None
        for doc in prescription_docs:
            candidate = Prescription.from_document(doc)
            if candidate.reference_code is not None and candidate.reference_code == reference_code:
                prescription = candidate
                break
        if prescription is None:
            raise InvalidReferenceCode(f"No prescription on appointment {appointment_id} matches the scanned code")

        medication_docs = await self.store.list_documents(
            PRESCRIPTION_MEDICATIONS, {'prescriptionId': prescription.prescription_id}
        )
        if not medication_docs:
            raise NoMedicationsFound(f"Prescription {prescription.prescription_id} has no medications")

        medications = []
        for doc in medication_docs:
            med = Medication.from_document(doc)
            medications.append(MedicationResponse(
                name=med.name,
                type=med.type,
                dosage=med.dosage,
                frequency=med.frequency,
                duration=med.duration,
                illnessType=med.illness_type,
                notes=med.notes,
                times=lookup_times(med.frequency),
                appointmentId=appointment.appointment_id or appointment_id,
                referenceCode=prescription.reference_code,
                prescriptionId=prescription.prescription_id,
                medicationId=med.medication_id,
                verifiedAccess=True,
            ))
        return medications
