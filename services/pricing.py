"""
Pricing of a registration.

The price unit depends on the tournament's structure type: a whole pond, a
single zone, or a set of areas. Each structure type has its own selection
variant and its own strategy; the dispatch table below covers every
StructureType member.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple, Union
from sqlalchemy.orm import Session
from models.tournament import StructureType
from models.pond import Pond
from models.zone import Zone
from models.area import Area
from core.exceptions import NotFound
from core.logging import logger

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PondOnlySelection:
    pond_id: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.pond_id is None


@dataclass(frozen=True)
class PondZoneSelection:
    zone_id: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.zone_id is None


@dataclass(frozen=True)
class PondZoneAreaSelection:
    area_ids: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.area_ids


Selection = Union[PondOnlySelection, PondZoneSelection, PondZoneAreaSelection]


def build_selection(
    structure_type: StructureType,
    area_ids: Optional[Iterable[int]] = None,
    zone_id: Optional[int] = None,
    pond_id: Optional[int] = None,
) -> Selection:
    """Pick the selection variant for a structure type; ids for other levels are ignored."""
    structure_type = StructureType(structure_type)
    if structure_type == StructureType.POND_ONLY:
        return PondOnlySelection(pond_id=pond_id)
    if structure_type == StructureType.POND_ZONE:
        return PondZoneSelection(zone_id=zone_id)
    return PondZoneAreaSelection(area_ids=tuple(area_ids or ()))


def _as_decimal(value) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(Decimal("0.01"))


class PricingStrategy(ABC):
    """Computes the payable total for one kind of selection"""

    selection_type: type

    @abstractmethod
    def calculate(self, db: Session, tournament_id: int, selection: Selection) -> Decimal:
        pass


class PondOnlyPricing(PricingStrategy):
    selection_type = PondOnlySelection

    def calculate(self, db: Session, tournament_id: int, selection: PondOnlySelection) -> Decimal:
        pond = db.query(Pond).filter(
            Pond.id == selection.pond_id,
            Pond.tournament_id == tournament_id
        ).first()
        if not pond:
            raise NotFound("Pond not found")
        return _as_decimal(pond.price)


class PondZonePricing(PricingStrategy):
    selection_type = PondZoneSelection

    def calculate(self, db: Session, tournament_id: int, selection: PondZoneSelection) -> Decimal:
        zone = db.query(Zone).join(Pond, Zone.pond_id == Pond.id).filter(
            Zone.id == selection.zone_id,
            Pond.tournament_id == tournament_id
        ).first()
        if not zone:
            raise NotFound("Zone not found")
        return _as_decimal(zone.price)


class PondZoneAreaPricing(PricingStrategy):
    selection_type = PondZoneAreaSelection

    def calculate(self, db: Session, tournament_id: int, selection: PondZoneAreaSelection) -> Decimal:
        requested = set(selection.area_ids)
        prices = db.query(Area.id, Area.price).join(
            Zone, Area.zone_id == Zone.id
        ).join(
            Pond, Zone.pond_id == Pond.id
        ).filter(
            Area.id.in_(requested),
            Pond.tournament_id == tournament_id
        ).all()

        if len(prices) != len(requested):
            raise NotFound("Some selected areas do not exist")
        return sum((_as_decimal(price) for _, price in prices), ZERO)


STRATEGIES: Dict[StructureType, PricingStrategy] = {
    StructureType.POND_ONLY: PondOnlyPricing(),
    StructureType.POND_ZONE: PondZonePricing(),
    StructureType.POND_ZONE_AREA: PondZoneAreaPricing(),
}


def get_pricing_strategy(structure_type: StructureType) -> PricingStrategy:
    return STRATEGIES[StructureType(structure_type)]


def calculate_total(db: Session, tournament_id: int, structure_type: StructureType, selection: Selection) -> Decimal:
    """
    Total payable for a selection in a tournament.

    An absent or empty selection prices at 0.00 instead of failing; callers
    treat that as an incomplete registration.
    """
    strategy = get_pricing_strategy(structure_type)
    if not isinstance(selection, strategy.selection_type):
        raise ValueError(
            f"{type(selection).__name__} does not match structure type {StructureType(structure_type).value}"
        )

    if selection.is_empty:
        logger.warning(f"Empty selection for tournament {tournament_id} ({StructureType(structure_type).value}), total defaults to 0")
        return ZERO

    return strategy.calculate(db, tournament_id, selection)
