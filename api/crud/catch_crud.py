from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from models.catch import Catch, ApprovalStatus
from models.registration import Registration, RegistrationStatus
from models.tournament import TournamentStatus
from models.user import User
from schemas.catch import CatchWithAngler, CatchStatusUpdate, Catch as CatchSchema
from services.registration_state import ensure_tournament_open
from api.crud.registration_crud import get_selected_areas
from core.exceptions import Conflict, NotFound
from core.logging import logger


def get_own_registration(db: Session, registration_id: int, user: User) -> Registration:
    registration = db.query(Registration).filter(
        Registration.id == registration_id,
        Registration.user_id == user.id
    ).first()
    if not registration:
        raise NotFound("Registration not found")
    return registration


def create_catch(
    db: Session,
    registration: Registration,
    catch_image: str,
    weight: Decimal,
    species: Optional[str] = None
) -> Catch:
    """Record a catch for a confirmed registration of an active tournament"""
    tournament = registration.tournament
    ensure_tournament_open(tournament)
    if registration.status != RegistrationStatus.CONFIRMED:
        raise Conflict("Only confirmed registrations can upload catches")
    if tournament.status != TournamentStatus.ACTIVE:
        raise Conflict("Catches can only be uploaded while the tournament is active")

    db_catch = Catch(
        registration_id=registration.id,
        catch_image=catch_image,
        weight=weight,
        species=species,
        approval_status=ApprovalStatus.PENDING
    )
    db.add(db_catch)
    db.commit()
    db.refresh(db_catch)
    logger.info(f"Catch {db_catch.id} uploaded for registration {registration.id}: {weight}kg")
    return db_catch


def get_registration_catches(db: Session, registration_id: int) -> List[Catch]:
    return db.query(Catch).filter(
        Catch.registration_id == registration_id
    ).order_by(Catch.uploaded_at.desc(), Catch.id.desc()).all()


def get_tournament_catches(db: Session, tournament_id: int, only_pending: bool = False) -> List[CatchWithAngler]:
    """Catches of a tournament for organizer review, with the angler and fishing location"""
    query = db.query(Catch, Registration, User).join(
        Registration, Catch.registration_id == Registration.id
    ).join(
        User, Registration.user_id == User.id
    ).filter(Registration.tournament_id == tournament_id)
    if only_pending:
        query = query.filter(Catch.approval_status == ApprovalStatus.PENDING)
    rows = query.order_by(Catch.uploaded_at.asc(), Catch.id.asc()).all()

    locations = get_selected_areas(db, list({registration.id for _, registration, _ in rows}))
    result = []
    for catch, registration, user in rows:
        areas = locations.get(registration.id, [])
        result.append(CatchWithAngler(
            **CatchSchema.model_validate(catch).model_dump(),
            full_name=user.full_name,
            mobile_no=user.mobile_no,
            fishing_location=", ".join(
                f"{area.pond_name} Z{area.zone_number}-A{area.area_number}" for area in areas
            ) or None
        ))
    return result


def update_catch_status(db: Session, catch: Catch, status_update: CatchStatusUpdate, organizer: User) -> Catch:
    ensure_tournament_open(catch.registration.tournament)

    catch.approval_status = status_update.approval_status
    if status_update.approval_status == ApprovalStatus.APPROVED:
        catch.approved_at = datetime.now(timezone.utc)
        catch.approved_by = organizer.id
        catch.rejection_reason = None
    elif status_update.approval_status == ApprovalStatus.REJECTED:
        catch.approved_at = None
        catch.approved_by = None
        catch.rejection_reason = status_update.rejection_reason
    else:
        catch.approved_at = None
        catch.approved_by = None
        catch.rejection_reason = None

    db.commit()
    db.refresh(catch)
    logger.info(f"Catch {catch.id} marked {catch.approval_status.value} by organizer {organizer.id}")
    return catch


def get_own_catch(db: Session, catch_id: int, user: User) -> Catch:
    catch = db.query(Catch).join(
        Registration, Catch.registration_id == Registration.id
    ).filter(
        Catch.id == catch_id,
        Registration.user_id == user.id
    ).first()
    if not catch:
        raise NotFound("Catch not found")
    return catch


def delete_catch(db: Session, catch: Catch) -> Optional[str]:
    """Only pending catches can be withdrawn. Returns the image reference to discard."""
    if catch.approval_status != ApprovalStatus.PENDING:
        raise Conflict("Only pending catches can be deleted")
    image = catch.catch_image
    db.delete(catch)
    db.commit()
    return image
