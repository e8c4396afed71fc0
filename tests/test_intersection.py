import pytest

from junction_guidance.intersection import ConnectedRoad, Intersection, IntersectionView, IntersectionViewData
from junction_guidance.intersection_generator import IntersectionGenerator
from junction_guidance.road_graph import RoadGraph
from junction_guidance.turn_instruction import DirectionModifier, TurnInstruction, TurnType
from tests.helpers import ORIGIN, VIA, make_arm, make_junction


def road(angle, entry_allowed=True, node=None, bearing=0.0):
    node = int(angle) if node is None else node
    return ConnectedRoad((1, node, 0), bearing, 10.0, entry_allowed, angle)


class TestFindClosestTurn:
    def test_closest_by_circular_deviation(self):
        intersection = Intersection([road(0), road(90), road(260)])
        assert intersection.find_closest_turn(180).angle == 260

    def test_closest_among_four(self):
        intersection = Intersection([road(10), road(95), road(170), road(260)])
        assert intersection.find_closest_turn(200).angle == 170

    def test_excluded_roads_are_skipped(self):
        intersection = Intersection([road(30, entry_allowed=False), road(40)])
        closest = intersection.find_closest_turn(35, exclude=lambda r: not r.entry_allowed)
        assert closest.angle == 40

    def test_none_when_everything_is_excluded(self):
        intersection = Intersection([road(30, entry_allowed=False), road(40, entry_allowed=False)])
        assert intersection.find_closest_turn(35, exclude=lambda r: not r.entry_allowed) is None

    def test_ties_go_to_the_first_road(self):
        intersection = Intersection([road(0), road(170), road(190)])
        assert intersection.find_closest_turn(180).angle == 170

    def test_empty(self):
        assert Intersection().find_closest_turn(180) is None

    def test_closest_bearing(self):
        intersection = Intersection([road(90, bearing=10.0), road(180, bearing=200.0)])
        assert intersection.find_closest_bearing(350.0).angle == 90


class TestIntersectionContainer:
    def test_find_road_for_eid(self):
        intersection = Intersection([road(0), road(90)])
        assert intersection.find_road_for_eid((1, 90, 0)).angle == 90
        assert intersection.find_road_for_eid((1, 7, 0)) is None

    def test_valid_and_sort(self):
        intersection = Intersection([road(0), road(270), road(90)])
        assert not intersection.valid()
        intersection.sort()
        assert intersection.valid()
        assert [r.angle for r in intersection] == [0, 90, 270]

    def test_equal_angles_are_valid(self):
        assert Intersection([road(0), road(90, node=2), road(90, node=3)]).valid()

    def test_slicing_and_len(self):
        intersection = Intersection([road(0), road(90), road(180)])
        assert len(intersection) == 3
        assert [r.angle for r in intersection[1:]] == [90, 180]

    def test_from_view_starts_without_instructions(self):
        view = IntersectionView([IntersectionViewData((1, 2, 0), 90.0, 10.0, True, 90.0)])
        intersection = Intersection.from_view(view)
        assert isinstance(intersection[0], ConnectedRoad)
        assert intersection[0].instruction == TurnInstruction.invalid()
        assert intersection[0].lane_data_id is None
        assert intersection[0].entry_allowed


class TestLaneCount:
    def test_highest_lane_count(self):
        G = make_junction([make_arm(90, lanes="2"), make_arm(180, lanes=["3", "4"])], lanes="1")
        road_graph = RoadGraph(G)
        intersection = IntersectionGenerator(road_graph).get_connected_roads(ORIGIN, VIA)
        assert intersection.get_highest_connected_lane_count(road_graph) == 4

    def test_empty_intersection_raises(self):
        road_graph = RoadGraph(make_junction([]))
        with pytest.raises(ValueError):
            Intersection().get_highest_connected_lane_count(road_graph)


class TestMirroring:
    @pytest.mark.parametrize("angle", [45.0, 93.5, 271.25])
    def test_mirroring_twice_is_identity(self, angle):
        original = ConnectedRoad((1, 2, 0), 45.0, 30.0, True, angle,
                                 TurnInstruction(TurnType.TURN, DirectionModifier.SHARP_RIGHT))
        assert original.mirrored().mirrored() == original

    def test_mirror_swaps_sides(self):
        original = ConnectedRoad((1, 2, 0), 45.0, 30.0, True, 90.0,
                                 TurnInstruction(TurnType.TURN, DirectionModifier.RIGHT))
        mirrored = original.mirrored()
        assert mirrored.angle == 270.0
        assert mirrored.instruction == TurnInstruction(TurnType.TURN, DirectionModifier.LEFT)
        assert mirrored.eid == original.eid
        assert mirrored.bearing == original.bearing
        assert mirrored.segment_length == original.segment_length

    def test_uturn_stays_at_zero(self):
        assert road(0).mirrored().angle == 0

    def test_original_is_untouched(self):
        original = road(93.5)
        original.mirrored()
        assert original.angle == 93.5
