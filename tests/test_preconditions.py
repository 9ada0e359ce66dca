"""
Negative tests - layout fails loudly on malformed graphs

Tests verify that:
1. Cells referencing missing bus nodes raise UnknownBusNodeError
2. Empty graphs and empty extern cells raise EmptyBusNodeSetError
3. Intern cells with a bad side split raise InvalidCellSplitError
4. Layout code still fails fast when precondition checks are disabled
"""

import pytest

from sld_layout import FreePositionFinder
from sld_layout.config.settings import set_flag
from sld_layout.layout.errors import (
    EmptyBusNodeSetError,
    InvalidCellSplitError,
    LayoutPreconditionError,
    UnknownBusNodeError,
)
from sld_layout.models.graph import Cell, CellType
from sld_layout.validators.preconditions import GraphPreconditions, ensure_well_formed

from builders import extern, intern, make_graph, single_flat_chain


@pytest.fixture
def validation_disabled():
    set_flag('validate_preconditions', False)
    yield
    set_flag('validate_preconditions', True)


class TestGraphPreconditions:
    """Test the structured precondition report."""

    def test_well_formed_graph(self):
        report = GraphPreconditions().check(single_flat_chain())
        assert report.ok
        assert report.status == "ok"
        assert report.issues == []

    def test_unknown_bus_node_issue(self):
        graph = make_graph(["B1"], [extern("E1", "B1", "B7")])
        report = GraphPreconditions().check(graph)
        assert report.status == "error"
        [issue] = report.errors
        assert issue.code == "UNKNOWN_BUS_NODE"
        assert issue.location == "E1"
        assert issue.bus_node_ids == ["B7"]

    def test_duplicate_feeder_is_a_warning(self):
        graph = make_graph(
            ["B1", "B2"],
            [extern("E1", "B1", feeders=["F1"]), extern("E2", "B2", feeders=["F1"])],
        )
        report = GraphPreconditions().check(graph)
        assert report.ok
        assert report.status == "warning"
        assert report.issues[0].code == "DUPLICATE_ID"

    @pytest.mark.parametrize(
        "left,right,bus_ids,reason",
        [
            (["B1"], [], ["B1"], "empty side"),
            (["B1"], ["B1", "B2"], ["B1", "B2"], "bus nodes on both sides"),
            (["B1"], ["B2"], ["B1", "B2", "B3"], "do not cover"),
        ],
    )
    def test_invalid_split_issue(self, left, right, bus_ids, reason):
        cell = Cell(
            id="I1",
            cell_type=CellType.INTERN_BOUND,
            bus_node_ids=bus_ids,
            left_bus_node_ids=left,
            right_bus_node_ids=right,
        )
        report = GraphPreconditions().check(make_graph(["B1", "B2", "B3"], [cell]))
        [issue] = report.errors
        assert issue.code == "INVALID_CELL_SPLIT"
        assert reason in issue.message


class TestEnsureWellFormed:
    """Test that the first error is raised as a typed exception."""

    def test_unknown_bus_node_raises(self):
        graph = make_graph(["B1"], [extern("E1", "B1", "B7")])
        with pytest.raises(UnknownBusNodeError) as exc_info:
            ensure_well_formed(graph)
        assert exc_info.value.bus_id == "B7"
        assert exc_info.value.cell_id == "E1"

    def test_empty_graph_raises(self):
        with pytest.raises(EmptyBusNodeSetError, match="horizontal chains"):
            ensure_well_formed(make_graph([]))

    def test_empty_extern_cell_raises(self):
        graph = make_graph(["B1"], [extern("E1")])
        with pytest.raises(EmptyBusNodeSetError, match="cell E1"):
            ensure_well_formed(graph)

    def test_invalid_split_raises(self):
        graph = make_graph(["B1", "B2"], [intern("I1", ["B1", "B2"], [])])
        with pytest.raises(InvalidCellSplitError, match="empty side"):
            ensure_well_formed(graph)

    def test_errors_are_value_errors(self):
        assert issubclass(UnknownBusNodeError, LayoutPreconditionError)
        assert issubclass(LayoutPreconditionError, ValueError)


class TestFinderPreconditions:
    """Test the finder checks preconditions and fails fast without them."""

    def test_finder_validates_by_default(self):
        graph = make_graph(["B1", "B2"], [intern("I1", ["B1", "B2"], [])])
        with pytest.raises(InvalidCellSplitError):
            FreePositionFinder().build_layout(graph)
        assert graph.get_bus_node("B1").structural_position is None

    def test_layout_fails_fast_without_validation(self, validation_disabled):
        graph = make_graph(["B1", "B2"], [intern("I1", ["B1", "B2"], [])])
        with pytest.raises(EmptyBusNodeSetError):
            FreePositionFinder().build_layout(graph)

    def test_unknown_bus_fails_fast_without_validation(self, validation_disabled):
        graph = make_graph(["B1"], [extern("E1", "B9")])
        with pytest.raises(UnknownBusNodeError, match="B9"):
            FreePositionFinder().build_layout(graph)

    def test_empty_graph_fails_fast_without_validation(self):
        with pytest.raises(EmptyBusNodeSetError):
            FreePositionFinder(validate=False).build_layout(make_graph([]))
