"""End-to-end tests for the free position finder."""

import itertools

import pytest

from sld_layout import FreePositionFinder, get_engine
from sld_layout.layout.engines import BasicPositionFinder
from sld_layout.models.graph import Direction

from builders import double_busbar, extern, intern, make_graph, position, single_flat_chain


def _two_substations():
    """Two unconnected double busbar sections plus an isolated bus node."""
    return make_graph(
        ["A1", "A2", "A3", "B1", "B2", "Z9"],
        [
            extern("EA1", "A1", "A3", feeders=["FA1", "FA2"]),
            extern("EA2", "A2"),
            intern("SA", ["A1"], ["A2"]),
            extern("EB1", "B1"),
            extern("EB2", "B2"),
            intern("SB", ["B1"], ["B2"]),
        ],
    )


class TestScenarios:
    """Reference layouts of small substations."""

    def test_single_flat_chain(self):
        graph = single_flat_chain()
        report = FreePositionFinder().build_layout(graph)

        assert report.chains == [["B1", "B2"]]
        assert position(graph, "B1") == [1, 1]
        assert position(graph, "B2") == [2, 1]
        e1, e2, _ = graph.cells
        assert (e1.order, e1.direction) == (0, Direction.TOP)
        assert (e2.order, e2.direction) == (1, Direction.BOTTOM)
        assert report.feeder_orders == {"E1_F": 1, "E2_F": 2}

    def test_two_isolated_clusters(self):
        graph = make_graph(["B1", "B2"])
        report = FreePositionFinder().build_layout(graph)

        assert report.chains == [["B1"], ["B2"]]
        assert [c.bus_node_ids for c in report.clusters] == [["B1"], ["B2"]]
        first, second = report.clusters
        assert first.first_row == 1
        assert second.first_row == first.next_row
        assert position(graph, "B1")[0] != position(graph, "B2")[0]

    def test_pattern_merge(self):
        graph = make_graph(
            ["B1", "B2", "B3"],
            [extern("E1", "B1", "B2", "B3"), extern("E2", "B1", "B2")],
        )
        report = FreePositionFinder().build_layout(graph)

        assert report.patterns == [["B1", "B2", "B3"]]
        assert report.cell_orders == {"E2": 0, "E1": 1}
        assert [position(graph, b) for b in ("B1", "B2", "B3")] == [[1, 1], [1, 2], [1, 3]]

    def test_pattern_merge_ignores_cell_list_order(self):
        """Test swapping cells with the same smallest bus keeps orders and directions."""
        reports = []
        for cells in (
            [extern("E1", "B1", "B2", "B3"), extern("E2", "B1", "B2")],
            [extern("E2", "B1", "B2"), extern("E1", "B1", "B2", "B3")],
        ):
            graph = make_graph(["B1", "B2", "B3"], cells)
            reports.append(FreePositionFinder().build_layout(graph))
        first, second = reports
        assert first.cell_orders == second.cell_orders == {"E2": 0, "E1": 1}
        assert first.cell_directions == second.cell_directions
        assert first.feeder_orders == second.feeder_orders == {"E2_F": 1, "E1_F": 2}

    def test_double_busbar(self):
        graph = double_busbar()
        report = FreePositionFinder().build_layout(graph)

        assert report.chains == [["B1", "B2"], ["B3", "B4"]]
        assert report.positions["B1"].to_list() == [1, 1]
        assert report.positions["B2"].to_list() == [2, 1]
        assert report.positions["B3"].to_list() == [1, 2]
        assert report.positions["B4"].to_list() == [2, 2]
        assert report.cell_directions == {"E1": Direction.TOP, "E2": Direction.BOTTOM}
        assert graph.max_bus_position.to_list() == [2, 2]


class TestProperties:
    """Invariants every layout must satisfy."""

    def test_chains_partition_bus_nodes(self):
        graph = _two_substations()
        report = FreePositionFinder().build_layout(graph)
        members = [b for chain in report.chains for b in chain]
        assert sorted(members) == sorted(b.id for b in graph.bus_nodes)

    def test_patterns_form_an_antichain(self):
        graph = _two_substations()
        report = FreePositionFinder().build_layout(graph)
        for p1, p2 in itertools.permutations(report.patterns, 2):
            assert not set(p1) <= set(p2)

    def test_every_bus_node_positioned(self):
        graph = _two_substations()
        FreePositionFinder().build_layout(graph)
        assert all(b.structural_position is not None for b in graph.bus_nodes)

    def test_determinism(self):
        graph1 = _two_substations()
        graph2 = graph1.model_copy(deep=True)
        report1 = FreePositionFinder().build_layout(graph1)
        report2 = FreePositionFinder().build_layout(graph2)
        assert report1.etag == report2.etag
        assert graph1 == graph2

    def test_monotonic_global_numbering(self):
        graph = _two_substations()
        report = FreePositionFinder().build_layout(graph)
        assert len(report.clusters) == 3
        for previous, current in zip(report.clusters, report.clusters[1:]):
            assert previous.first_row < previous.next_row <= current.first_row
            assert previous.next_feeder_order == current.first_feeder_order
        for cluster in report.clusters:
            rows = [report.positions[b].row for b in cluster.bus_node_ids]
            assert cluster.first_row <= min(rows) and max(rows) < cluster.next_row

    def test_feeder_orders_are_distinct_and_increasing(self):
        graph = _two_substations()
        report = FreePositionFinder().build_layout(graph)
        orders = sorted(report.feeder_orders.values())
        assert orders == list(range(1, len(graph.feeder_nodes()) + 1))

    def test_cell_order_restarts_per_cluster(self):
        graph = _two_substations()
        report = FreePositionFinder().build_layout(graph)
        assert report.cell_orders["EA1"] == 0
        assert report.cell_orders["EB1"] == 0
        assert report.cell_orders["EB2"] == 1

    def test_aligned_chains_have_no_inversion(self):
        graph = double_busbar()
        finder = FreePositionFinder()
        report = finder.build_layout(graph)
        for c1, c2 in itertools.combinations(report.chains, 2):
            shared = [b for b in c1 if b in c2]
            for b1, b2 in itertools.combinations(shared, 2):
                assert (c1.index(b1) - c1.index(b2)) * (c2.index(b1) - c2.index(b2)) > 0


class TestFinderOptions:
    """Test counters, settings and the finder registry."""

    def test_custom_first_counters(self):
        graph = single_flat_chain()
        report = FreePositionFinder(first_structural_position=10, first_feeder_order=100).build_layout(graph)
        assert position(graph, "B1") == [10, 1]
        assert report.feeder_orders == {"E1_F": 100, "E2_F": 101}

    def test_get_engine(self):
        assert get_engine("free") is FreePositionFinder
        assert get_engine("basic") is BasicPositionFinder
        with pytest.raises(ValueError, match="Unknown position finder"):
            get_engine("force")

    def test_report_to_dict(self):
        report = FreePositionFinder().build_layout(single_flat_chain())
        data = report.to_dict()
        assert list(data.keys()) == sorted(data.keys())
        assert data["positions"] == {"B1": [1, 1], "B2": [2, 1]}
        assert data["algorithm"] == "free"
