# rxguard/routers/scan.py
#
# This router exposes the prescription QR scan over HTTP.

from typing import Any, Dict, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, status

from ..errors import (
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
from ..models import ActorContext, QRScanRequest, QRScanResponse
from ..qr import DEMO_PREFIX
from ..scanner import process_prescription_qr
from ..security import get_actor_context
from ..store import get_document_store

router = APIRouter()

STATUS_CODES: Dict[Type[ScanError], int] = {
    NotLoggedIn: status.HTTP_401_UNAUTHORIZED,
    MalformedPayload: status.HTTP_400_BAD_REQUEST,
    AppointmentNotFound: status.HTTP_404_NOT_FOUND,
    AccessDenied: status.HTTP_403_FORBIDDEN,
    NoPrescriptionFound: status.HTTP_404_NOT_FOUND,
    InvalidReferenceCode: status.HTTP_403_FORBIDDEN,
    NoMedicationsFound: status.HTTP_404_NOT_FOUND,
    StorageUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@router.post("/prescriptions/scan", response_model=QRScanResponse, tags=["Prescriptions"])
async def scan_prescription_qr(
    scan: QRScanRequest,
    actor: Optional[ActorContext] = Depends(get_actor_context),
    store: Any = Depends(get_document_store),
):
    """
    Resolves a scanned prescription QR code for the logged-in user.
    """
    try:
        medications = await process_prescription_qr(scan.qrData, actor, store)
    except ScanError as e:
        raise HTTPException(
            status_code=STATUS_CODES.get(type(e), status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail=e.user_message,
        )

    return QRScanResponse(
        medications=medications,
        count=len(medications),
        demo=scan.qrData.strip().startswith(DEMO_PREFIX),
    )
