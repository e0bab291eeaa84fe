from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import List, Optional
from api.deps.db import get_db
from api.crud.registration_crud import (
    get_draft_with_areas, get_my_drafts, get_my_registrations, get_tournament_registrations,
    get_registration_detail
)
from services.allocation import submit_registration, save_draft
from services.registration_state import change_status
from core.validators import validate_tournament_owner, validate_registration_owner, validate_registration_access
from core.storage import save_optional_upload, discard_upload
from core.exceptions import ValidationFailed
from core.auth import get_current_user, get_current_organizer, get_current_principal
from schemas.registration import (
    RegistrationRequest, RegistrationResult, RegistrationStatusUpdate, RegistrationStatusResult,
    RegistrationWithAreas, MyDraft, MyRegistration, TournamentRegistration, RegistrationDetail
)
from models.user import User

router = APIRouter(prefix="/registrations", tags=["Registrations"])


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    message = first.get("msg", "Invalid request")
    return message.replace("Value error, ", "", 1)


@router.post("", response_model=RegistrationResult, status_code=status.HTTP_201_CREATED)
async def register_for_tournament(
    tournament_id: int = Form(...),
    area_ids: Optional[str] = Form(None),
    zone_id: Optional[int] = Form(None),
    pond_id: Optional[int] = Form(None),
    bank_account_no: Optional[str] = Form(None),
    bank_name: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    payment_receipt: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Submit a registration (or finalize the draft); the selected areas are claimed atomically"""
    try:
        request = RegistrationRequest(
            tournament_id=tournament_id,
            area_ids=area_ids,
            zone_id=zone_id,
            pond_id=pond_id,
            bank_account_no=bank_account_no,
            bank_name=bank_name,
            notes=notes
        )
    except ValidationError as e:
        raise ValidationFailed(_validation_message(e))
    if not request.bank_account_no:
        raise ValidationFailed("Bank account number is required")

    receipt = save_optional_upload(payment_receipt, "receipts")
    try:
        summary = submit_registration(db, current_user.id, request, payment_receipt=receipt)
    except Exception:
        discard_upload(receipt)
        raise
    return RegistrationResult(message="Registration submitted successfully", registration=summary)


@router.post("/draft", response_model=RegistrationResult)
async def save_registration_draft(
    request: RegistrationRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create or replace the caller's draft; draft selections do not reserve anything"""
    summary = save_draft(db, current_user.id, request)
    return RegistrationResult(message="Draft saved", registration=summary)


@router.get("/draft/{tournament_id}", response_model=RegistrationWithAreas)
async def get_registration_draft(
    tournament_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return get_draft_with_areas(db, current_user.id, tournament_id)


@router.get("/my-drafts", response_model=List[MyDraft])
async def list_my_drafts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return get_my_drafts(db, current_user.id)


@router.get("/my-registrations", response_model=List[MyRegistration])
async def list_my_registrations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return get_my_registrations(db, current_user.id)


@router.get("/tournament/{tournament_id}", response_model=List[TournamentRegistration])
async def list_tournament_registrations(
    tournament_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_tournament_owner(db, tournament_id, current_user)
    return get_tournament_registrations(db, tournament_id)


@router.patch("/{registration_id}/status", response_model=RegistrationStatusResult)
async def update_registration_status(
    registration_id: int,
    status_update: RegistrationStatusUpdate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    registration = validate_registration_owner(db, registration_id, current_user)
    registration = change_status(db, registration, status_update.status)
    return RegistrationStatusResult(message="Registration status updated", status=registration.status)


@router.get("/{registration_id}", response_model=RegistrationDetail)
async def get_registration(
    registration_id: int,
    current_user: User = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    registration = validate_registration_access(db, registration_id, current_user)
    return get_registration_detail(db, registration)
