from typing import List
from sqlalchemy import case, func
from sqlalchemy.orm import Session
from models.registration import Registration, RegistrationStatus
from models.catch import Catch, ApprovalStatus
from models.user import User
from schemas.tournament import LeaderboardEntry


def get_leaderboard(db: Session, tournament_id: int) -> List[LeaderboardEntry]:
    """
    Ranking of confirmed registrations.

    total_catches counts every catch regardless of approval; weights only
    count approved catches. Ordered by total approved weight, then by the
    biggest approved catch.
    """
    approved_weight = case(
        (Catch.approval_status == ApprovalStatus.APPROVED, Catch.weight),
        else_=0
    )
    total_weight = func.coalesce(func.sum(approved_weight), 0)
    biggest_catch = func.coalesce(func.max(approved_weight), 0)

    rows = db.query(
        User.id.label("user_id"),
        User.full_name,
        Registration.id.label("registration_id"),
        func.count(Catch.id).label("total_catches"),
        total_weight.label("total_weight"),
        biggest_catch.label("biggest_catch"),
    ).select_from(Registration).join(
        User, Registration.user_id == User.id
    ).outerjoin(
        Catch, Catch.registration_id == Registration.id
    ).filter(
        Registration.tournament_id == tournament_id,
        Registration.status == RegistrationStatus.CONFIRMED
    ).group_by(
        User.id, User.full_name, Registration.id
    ).order_by(
        total_weight.desc(), biggest_catch.desc(), Registration.id.asc()
    ).all()

    return [
        LeaderboardEntry(
            user_id=row.user_id,
            full_name=row.full_name,
            registration_id=row.registration_id,
            total_catches=row.total_catches,
            total_weight=float(row.total_weight or 0),
            biggest_catch=float(row.biggest_catch or 0),
        )
        for row in rows
    ]
