from decimal import Decimal, InvalidOperation
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional
from api.deps.db import get_db
from api.crud.catch_crud import (
    get_own_registration, create_catch, get_registration_catches, get_tournament_catches,
    update_catch_status, get_own_catch, delete_catch
)
from core.validators import validate_tournament_owner, validate_catch_owner, validate_registration_access
from core.storage import save_upload, discard_upload
from core.exceptions import ValidationFailed
from core.auth import get_current_user, get_current_organizer, get_current_principal
from schemas.catch import Catch, CatchCreated, CatchWithAngler, CatchStatusUpdate
from models.user import User

router = APIRouter(prefix="/catches", tags=["Catches"])

MIN_WEIGHT = Decimal("0.01")


def _parse_weight(raw: str) -> Decimal:
    try:
        weight = Decimal(raw.strip())
    except (InvalidOperation, AttributeError):
        raise ValidationFailed("Weight must be a number")
    if not weight.is_finite() or weight < MIN_WEIGHT:
        raise ValidationFailed("Weight must be at least 0.01 kg")
    return weight.quantize(Decimal("0.001"))


@router.post("", response_model=CatchCreated, status_code=status.HTTP_201_CREATED)
async def upload_catch(
    registration_id: int = Form(...),
    weight: str = Form(...),
    species: Optional[str] = Form(None),
    catch_image: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Upload a catch photo for the caller's confirmed registration"""
    parsed_weight = _parse_weight(weight)
    registration = get_own_registration(db, registration_id, current_user)

    image = save_upload(catch_image, "catches")
    try:
        catch = create_catch(db, registration, image, parsed_weight, (species or "").strip() or None)
    except Exception:
        discard_upload(image)
        raise
    return CatchCreated(message="Catch uploaded successfully", catch=Catch.model_validate(catch))


@router.get("/registration/{registration_id}", response_model=List[Catch])
async def list_registration_catches(
    registration_id: int,
    current_user: User = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    validate_registration_access(db, registration_id, current_user)
    return get_registration_catches(db, registration_id)


@router.get("/tournament/{tournament_id}/pending", response_model=List[CatchWithAngler])
async def list_pending_catches(
    tournament_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_tournament_owner(db, tournament_id, current_user)
    return get_tournament_catches(db, tournament_id, only_pending=True)


@router.get("/tournament/{tournament_id}", response_model=List[CatchWithAngler])
async def list_tournament_catches(
    tournament_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_tournament_owner(db, tournament_id, current_user)
    return get_tournament_catches(db, tournament_id)


@router.patch("/{catch_id}/status", response_model=Catch)
async def review_catch(
    catch_id: int,
    status_update: CatchStatusUpdate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    catch = validate_catch_owner(db, catch_id, current_user)
    return update_catch_status(db, catch, status_update, current_user)


@router.delete("/{catch_id}")
async def withdraw_catch(
    catch_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    catch = get_own_catch(db, catch_id, current_user)
    discard_upload(delete_catch(db, catch))
    return {"message": "Catch deleted successfully"}
