from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session
from typing import List
from api.deps.db import get_db
from api.crud.pond_crud import (
    create_pond, get_tournament_ponds, get_pond_tree, update_pond, set_layout_image, delete_pond
)
from core.validators import validate_tournament_owner, validate_pond_owner
from core.storage import save_upload, discard_upload
from core.auth import get_current_organizer
from schemas.layout import Pond, PondCreate, PondUpdate, PondWithCounts, PondTree
from models.user import User

router = APIRouter(prefix="/ponds", tags=["Ponds"])


@router.post("", response_model=Pond, status_code=status.HTTP_201_CREATED)
async def create_new_pond(
    pond: PondCreate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_tournament_owner(db, pond.tournament_id, current_user)
    return create_pond(db, pond)


@router.get("/tournament/{tournament_id}", response_model=List[PondWithCounts])
async def list_tournament_ponds(
    tournament_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    validate_tournament_owner(db, tournament_id, current_user)
    return get_tournament_ponds(db, tournament_id)


@router.get("/{pond_id}/full", response_model=PondTree)
async def get_full_pond(
    pond_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    """Pond with zones and areas, area availability is live"""
    pond = validate_pond_owner(db, pond_id, current_user)
    return get_pond_tree(db, pond)


@router.put("/{pond_id}", response_model=Pond)
async def update_existing_pond(
    pond_id: int,
    pond_update: PondUpdate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    pond = validate_pond_owner(db, pond_id, current_user)
    return update_pond(db, pond, pond_update)


@router.post("/{pond_id}/layout", response_model=Pond)
async def upload_pond_layout(
    pond_id: int,
    layout_image: UploadFile = File(...),
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    pond = validate_pond_owner(db, pond_id, current_user)
    reference = save_upload(layout_image, "layouts")
    discard_upload(set_layout_image(db, pond, reference))
    return pond


@router.delete("/{pond_id}")
async def delete_existing_pond(
    pond_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db)
):
    pond = validate_pond_owner(db, pond_id, current_user)
    layout_image = pond.layout_image
    delete_pond(db, pond)
    discard_upload(layout_image)
    return {"message": "Pond deleted successfully"}
