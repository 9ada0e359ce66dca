"""Tests for the substation graph models and layout settings."""

import pytest
from pydantic import ValidationError

from sld_layout.config import settings
from sld_layout.models.graph import (
    BusNode,
    Cell,
    CellType,
    FeederNode,
    Position,
    Side,
    SubstationGraph,
)
from sld_layout.models.layout_report import LayoutReport

from builders import intern, make_graph


class TestSubstationGraph:
    """Test graph lookups and bookkeeping."""

    def test_duplicate_bus_ids_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate bus node id"):
            SubstationGraph(bus_nodes=[BusNode(id="B1"), BusNode(id="B1")])

    def test_get_bus_node_missing(self):
        with pytest.raises(KeyError, match="B9"):
            make_graph(["B1"]).get_bus_node("B9")

    def test_max_bus_position(self):
        graph = make_graph(["B1", "B2", "B3"])
        graph.bus_nodes[0].structural_position = Position(row=4, column=1)
        graph.bus_nodes[1].structural_position = Position(row=2, column=3)
        graph.set_max_bus_position()
        assert graph.max_bus_position.to_list() == [4, 3]

    def test_max_bus_position_without_positions(self):
        graph = make_graph(["B1"])
        graph.set_max_bus_position()
        assert graph.max_bus_position is None


class TestCell:
    """Test cell helpers."""

    def test_side_bus_node_ids(self):
        cell = intern("I1", ["B1"], ["B2", "B3"], cell_type=CellType.INTERN_BOUND)
        assert cell.is_intern
        assert cell.side_bus_node_ids(Side.LEFT) == ["B1"]
        assert cell.side_bus_node_ids(Side.RIGHT) == ["B2", "B3"]

    def test_order_from_feeder_orders(self):
        cell = Cell(
            id="E1",
            cell_type=CellType.EXTERN,
            feeders=[FeederNode(id="F1", order=7), FeederNode(id="F2", order=3), FeederNode(id="F3")],
        )
        cell.order_from_feeder_orders()
        assert cell.order == 3

    def test_order_untouched_without_feeder_orders(self):
        cell = Cell(id="E1", cell_type=CellType.EXTERN, feeders=[FeederNode(id="F1")])
        cell.order_from_feeder_orders()
        assert cell.order is None


class TestLayoutReport:
    """Test report etag computation."""

    def test_same_content_same_etag(self):
        r1 = LayoutReport(algorithm="free", positions={"B1": Position(row=1, column=1)})
        r2 = LayoutReport(algorithm="free", positions={"B1": Position(row=1, column=1)})
        assert r1.etag == r2.etag
        assert len(r1.etag) == 64

    def test_etag_changes_with_content(self):
        r1 = LayoutReport(algorithm="free", positions={"B1": Position(row=1, column=1)})
        r2 = LayoutReport(algorithm="free", positions={"B1": Position(row=1, column=2)})
        assert r1.etag != r2.etag


class TestSettings:
    """Test flags and numeric settings."""

    def test_default_flags(self):
        assert settings.get_all_flags() == {'validate_preconditions': True}

    def test_unknown_flag_raises(self):
        with pytest.raises(KeyError, match="Unknown feature flag"):
            settings.is_enabled('use_gpu')
        with pytest.raises(KeyError, match="Available flags: validate_preconditions"):
            settings.set_flag('use_gpu', True)

    def test_settings(self):
        assert settings.get_setting('first_structural_position') == 1
        assert settings.get_setting('basic_feeder_order_step') == 12
        with pytest.raises(KeyError, match="Unknown layout setting"):
            settings.get_setting('page_width')
        with pytest.raises(KeyError, match="Available settings: first_structural_position"):
            settings.set_setting('page_width', 3)

    def test_set_setting(self):
        original = settings.get_setting('first_feeder_order')
        try:
            settings.set_setting('first_feeder_order', 40)
            assert settings.get_setting('first_feeder_order') == 40
        finally:
            settings.set_setting('first_feeder_order', original)
