"""
Pricing per structure type
"""
from decimal import Decimal

import pytest

from models.tournament import StructureType
from services.pricing import (
    build_selection, calculate_total, get_pricing_strategy, STRATEGIES,
    PondOnlySelection, PondZoneSelection, PondZoneAreaSelection
)
from core.exceptions import NotFound


class TestSelectionVariants:
    """build_selection picks the variant matching the structure type"""

    def test_pond_only(self):
        assert build_selection(StructureType.POND_ONLY, area_ids=[1], zone_id=2, pond_id=3) == PondOnlySelection(pond_id=3)

    def test_pond_zone(self):
        assert build_selection(StructureType.POND_ZONE, area_ids=[1], zone_id=2, pond_id=3) == PondZoneSelection(zone_id=2)

    def test_pond_zone_area(self):
        selection = build_selection("pond_zone_area", area_ids=[4, 5])
        assert selection == PondZoneAreaSelection(area_ids=(4, 5))

    def test_every_structure_type_has_a_strategy(self):
        assert set(STRATEGIES) == set(StructureType)
        for structure_type in StructureType:
            assert get_pricing_strategy(structure_type) is STRATEGIES[structure_type]


class TestCalculateTotal:

    def test_sum_of_area_prices(self, db, make_tournament, make_layout):
        tournament = make_tournament()
        layout = make_layout(tournament, area_prices=(50, 30))
        selection = PondZoneAreaSelection(area_ids=tuple(a.id for a in layout["areas"]))

        total = calculate_total(db, tournament.id, StructureType.POND_ZONE_AREA, selection)

        assert total == Decimal("80.00")

    def test_zone_price(self, db, make_tournament, make_layout):
        tournament = make_tournament(StructureType.POND_ZONE)
        layout = make_layout(tournament, zone_price=75)

        total = calculate_total(db, tournament.id, StructureType.POND_ZONE, PondZoneSelection(layout["zone"].id))

        assert total == Decimal("75.00")

    def test_pond_price(self, db, make_tournament, make_layout):
        tournament = make_tournament(StructureType.POND_ONLY)
        layout = make_layout(tournament, pond_price=120)

        total = calculate_total(db, tournament.id, StructureType.POND_ONLY, PondOnlySelection(layout["pond"].id))

        assert total == Decimal("120.00")

    def test_fractional_prices_are_exact(self, db, make_tournament, make_layout):
        tournament = make_tournament()
        layout = make_layout(tournament, area_prices=("0.10", "0.20"))
        selection = PondZoneAreaSelection(area_ids=tuple(a.id for a in layout["areas"]))

        assert calculate_total(db, tournament.id, StructureType.POND_ZONE_AREA, selection) == Decimal("0.30")

    @pytest.mark.parametrize("structure_type,selection", [
        (StructureType.POND_ONLY, PondOnlySelection()),
        (StructureType.POND_ZONE, PondZoneSelection()),
        (StructureType.POND_ZONE_AREA, PondZoneAreaSelection()),
    ])
    def test_empty_selection_prices_at_zero(self, db, make_tournament, structure_type, selection):
        tournament = make_tournament(structure_type)
        assert calculate_total(db, tournament.id, structure_type, selection) == Decimal("0.00")

    def test_unknown_area(self, db, make_tournament, make_layout):
        tournament = make_tournament()
        layout = make_layout(tournament)
        selection = PondZoneAreaSelection(area_ids=(layout["areas"][0].id, 9999))

        with pytest.raises(NotFound):
            calculate_total(db, tournament.id, StructureType.POND_ZONE_AREA, selection)

    def test_area_of_another_tournament(self, db, make_tournament, make_layout):
        tournament = make_tournament()
        other = make_tournament()
        foreign = make_layout(other)

        with pytest.raises(NotFound):
            calculate_total(
                db, tournament.id, StructureType.POND_ZONE_AREA,
                PondZoneAreaSelection(area_ids=(foreign["areas"][0].id,))
            )

    def test_zone_of_another_tournament(self, db, make_tournament, make_layout):
        tournament = make_tournament(StructureType.POND_ZONE)
        foreign = make_layout(make_tournament(StructureType.POND_ZONE))

        with pytest.raises(NotFound):
            calculate_total(db, tournament.id, StructureType.POND_ZONE, PondZoneSelection(foreign["zone"].id))

    def test_selection_must_match_structure_type(self, db, make_tournament):
        tournament = make_tournament()
        with pytest.raises(ValueError):
            calculate_total(db, tournament.id, StructureType.POND_ZONE_AREA, PondZoneSelection(zone_id=1))
