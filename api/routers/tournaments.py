from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional
from api.deps.db import get_db
from api.crud.tournament_crud import (
    create_tournament, get_organizer_tournaments, get_tournament_detail, get_registration_view,
    get_public_leaderboard, update_tournament, update_tournament_status, update_tournament_images,
    delete_tournament
)
from core.validators import validate_tournament_owner
from core.storage import save_optional_upload, discard_upload
from core.exceptions import ValidationFailed
from core.auth import get_current_organizer
from schemas.tournament import (
    Tournament, TournamentCreate, TournamentUpdate, TournamentStatusUpdate, TournamentSummary,
    TournamentDetail, TournamentRegistrationView, Leaderboard
)
from models.user import User

router = APIRouter(prefix="/tournaments", tags=["Tournaments"])


@router.post("", response_model=Tournament, status_code=status.HTTP_201_CREATED)
async def create_new_tournament(
    tournament: TournamentCreate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    """Create a tournament in draft status with fresh registration and leaderboard links"""
    return create_tournament(db, tournament, current_user.id)


@router.get("/my-tournaments", response_model=List[TournamentSummary])
async def get_my_tournaments(
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    return get_organizer_tournaments(db, current_user.id)


@router.get("/register/{link}", response_model=TournamentRegistrationView)
async def get_tournament_for_registration(link: str, db: Session = Depends(get_db)):
    """Public registration page with the pond/zone/area layout and live availability"""
    return get_registration_view(db, link)


@router.get("/leaderboard/{link}", response_model=Leaderboard)
async def get_tournament_leaderboard(link: str, db: Session = Depends(get_db)):
    return get_public_leaderboard(db, link)


@router.get("/{tournament_id}", response_model=TournamentDetail)
async def get_tournament_details(tournament_id: int, db: Session = Depends(get_db)):
    return get_tournament_detail(db, tournament_id)


@router.patch("/{tournament_id}/status", response_model=Tournament)
async def change_tournament_status(
    tournament_id: int,
    status_update: TournamentStatusUpdate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    tournament = validate_tournament_owner(db, tournament_id, current_user)
    return update_tournament_status(db, tournament, status_update.status)


@router.put("/{tournament_id}", response_model=Tournament)
async def update_existing_tournament(
    tournament_id: int,
    tournament_update: TournamentUpdate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    tournament = validate_tournament_owner(db, tournament_id, current_user)
    return update_tournament(db, tournament, tournament_update)


@router.post("/{tournament_id}/images", response_model=Tournament)
async def upload_tournament_images(
    tournament_id: int,
    banner_image: Optional[UploadFile] = File(None),
    payment_details_image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    """Upload the banner and/or the payment details image"""
    tournament = validate_tournament_owner(db, tournament_id, current_user)

    banner = save_optional_upload(banner_image, "banners")
    try:
        payment_details = save_optional_upload(payment_details_image, "payment-details")
    except Exception:
        discard_upload(banner)
        raise
    if not banner and not payment_details:
        raise ValidationFailed("No image uploaded")

    for replaced in update_tournament_images(db, tournament, banner, payment_details):
        discard_upload(replaced)
    return tournament


@router.delete("/{tournament_id}")
async def delete_existing_tournament(
    tournament_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    tournament = validate_tournament_owner(db, tournament_id, current_user)
    delete_tournament(db, tournament)
    return {"message": "Tournament deleted successfully"}
