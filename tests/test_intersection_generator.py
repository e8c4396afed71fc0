import networkx as nx

from junction_guidance.intersection import ConnectedRoad, Intersection
from junction_guidance.intersection_generator import IntersectionGenerator
from junction_guidance.road_graph import RoadGraph
from junction_guidance.turn_instruction import TurnInstruction
from tests.helpers import CENTER, ORIGIN, VIA, make_arm, make_junction, make_signal_chain


def generator_for(G, **kwargs):
    return IntersectionGenerator(RoadGraph(G), **kwargs)


class TestIntersectionView:
    def test_roads_sorted_with_uturn_first(self):
        G = make_junction([make_arm(270, "West Street"), make_arm(180, "Main Street"), make_arm(90, "East Street")])
        view = generator_for(G).get_intersection_view(ORIGIN, VIA)
        assert view.valid()
        assert [round(road.angle) for road in view] == [0, 90, 180, 270]
        assert view[0].eid == (CENTER, ORIGIN, 0)
        assert [road.eid[1] for road in view[1:]] == [4, 3, 2]

    def test_uturn_not_allowed_at_junctions(self):
        G = make_junction([make_arm(90), make_arm(270)])
        view = generator_for(G).get_intersection_view(ORIGIN, VIA)
        assert not view[0].entry_allowed
        assert all(road.entry_allowed for road in view[1:])

    def test_uturn_allowed_at_dead_end(self):
        view = generator_for(make_junction([])).get_intersection_view(ORIGIN, VIA)
        assert len(view) == 1
        assert view[0].angle == 0
        assert view[0].entry_allowed

    def test_uturn_against_one_way_not_allowed(self):
        view = generator_for(make_junction([], via_oneway=True)).get_intersection_view(ORIGIN, VIA)
        assert len(view) == 1
        assert not view[0].entry_allowed

    def test_one_way_roads(self):
        G = make_junction([make_arm(90, access="in"), make_arm(270, access="out")])
        view = generator_for(G).get_intersection_view(ORIGIN, VIA)
        by_node = {road.eid[1]: road for road in view}
        assert not by_node[2].entry_allowed
        assert by_node[2].angle == 90
        assert by_node[3].entry_allowed

    def test_segment_length_and_bearing(self):
        G = make_junction([make_arm(90, length=42.0)], via_length=25.0)
        view = generator_for(G).get_intersection_view(ORIGIN, VIA)
        assert view[0].segment_length == 25.0
        assert view[1].segment_length == 42.0
        assert view[1].bearing == 90.0

    def test_connected_roads_have_no_instructions_yet(self):
        G = make_junction([make_arm(90), make_arm(180)])
        intersection = generator_for(G).get_connected_roads(ORIGIN, VIA)
        assert isinstance(intersection, Intersection)
        assert all(isinstance(road, ConnectedRoad) for road in intersection)
        assert all(road.instruction == TurnInstruction.invalid() for road in intersection)


class TestSkipDegreeTwoNodes:
    def test_walks_to_next_junction(self):
        generator = generator_for(make_signal_chain())
        assert generator.skip_degree_two_nodes(0, (0, 1, 0)) == (3, (3, 4, 0))

    def test_stops_at_dead_end(self):
        generator = generator_for(make_signal_chain(branching=False))
        assert generator.skip_degree_two_nodes(0, (0, 1, 0)) == (3, (3, 4, 0))

    def test_only_artificial_nodes(self):
        G = make_signal_chain(artificial=False)
        assert generator_for(G, skip_only_artificial=True).skip_degree_two_nodes(0, (0, 1, 0)) == (0, (0, 1, 0))
        assert generator_for(G).skip_degree_two_nodes(0, (0, 1, 0)) == (3, (3, 4, 0))

    def test_step_away_from_previous_node(self):
        generator = generator_for(make_signal_chain())
        assert generator.step(0, (0, 1, 0)) == (1, (1, 2, 0))

    def test_cycle_terminates(self):
        G = nx.MultiDiGraph(crs="EPSG:4326")
        for node, (x, y) in enumerate([(0.0, 0.0), (0.0, 0.001), (0.001, 0.0)]):
            G.add_node(node, x=x, y=y)
        for u, v, bearing in [(0, 1, 0.0), (1, 2, 135.0), (2, 0, 270.0)]:
            G.add_edge(u, v, key=0, bearing=bearing, name="Ring Road", highway="residential", length=50.0)
            G.add_edge(v, u, key=0, bearing=(bearing + 180.0) % 360, name="Ring Road", highway="residential",
                       length=50.0)
        assert generator_for(G).skip_degree_two_nodes(0, (0, 1, 0)) == (0, (0, 1, 0))
