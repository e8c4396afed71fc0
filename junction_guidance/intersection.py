"""
Intersections as seen from an arrival edge.

An intersection is the list of roads leaving a node, ordered by their turn angle
relative to the arrival edge. Index 0 holds the u-turn (angle 0) and angles
increase from sharp right over straight (180) to sharp left. Neighbours in the
list are neighbours on the ground, which every fork and obvious-turn decision
relies on.

    IntersectionShapeData   edge id, bearing, segment length
    IntersectionViewData    + entry_allowed, angle
    ConnectedRoad           + instruction, lane_data_id
"""
from collections import namedtuple
from dataclasses import dataclass, field, fields, replace
from typing import Optional

from .geometry import angular_deviation
from .turn_instruction import TurnInstruction


@dataclass
class IntersectionShapeData:
    eid: tuple
    bearing: float
    segment_length: float


@dataclass
class IntersectionViewData(IntersectionShapeData):
    entry_allowed: bool = False
    angle: float = 0.0

    def compare_by_angle(self, other):
        return self.angle < other.angle


@dataclass
class ConnectedRoad(IntersectionViewData):
    instruction: TurnInstruction = field(default_factory=TurnInstruction.invalid)
    lane_data_id: Optional[int] = None

    @classmethod
    def from_view(cls, view, instruction=None, lane_data_id=None):
        values = {f.name: getattr(view, f.name) for f in fields(IntersectionViewData)}
        return cls(instruction=instruction or TurnInstruction.invalid(), lane_data_id=lane_data_id, **values)

    def mirrored(self):
        """
        Copy of this road with left and right swapped: a left turn becomes the
        equivalent right turn and vice versa. The u-turn stays at angle 0.
        """
        angle = self.angle
        if angular_deviation(angle, 0) > 1e-9:
            angle = 360 - angle
        return replace(self, angle=angle, instruction=self.instruction.mirrored())


class IntersectionView:
    """
    Roads of an intersection, sorted by angle.

    Sorting is not enforced on every access; `valid()` checks it and `sort()`
    restores it after edits that move angles.
    """

    def __init__(self, roads=()):
        self._roads = list(roads)

    def __len__(self):
        return len(self._roads)

    def __iter__(self):
        return iter(self._roads)

    def __getitem__(self, index):
        return self._roads[index]

    def __repr__(self):
        return f"{type(self).__name__}({self._roads!r})"

    def valid(self):
        return all(not b.compare_by_angle(a) for a, b in zip(self._roads, self._roads[1:]))

    def sort(self):
        # stable, keeps the u-turn in front of other roads at angle 0
        self._roads.sort(key=lambda road: road.angle)

    def find_closest_turn(self, angle, exclude=None):
        """
        Road whose angle deviates least from `angle`. Ties go to the first road.

        With `exclude`, roads for which exclude(road) is True are only picked if
        nothing else is left, in which case None is returned instead.
        """
        if not self._roads:
            return None
        if exclude is None:
            return min(self._roads, key=lambda road: angular_deviation(road.angle, angle))
        candidate = min(self._roads,
                        key=lambda road: (bool(exclude(road)), angular_deviation(road.angle, angle)))
        return None if exclude(candidate) else candidate

    def find_road_for_eid(self, eid):
        return next((road for road in self._roads if road.eid == eid), None)

    def find_closest_bearing(self, bearing):
        if not self._roads:
            return None
        return min(self._roads, key=lambda road: angular_deviation(road.bearing, bearing))

    def get_highest_connected_lane_count(self, road_graph):
        if not self._roads:
            raise ValueError("lane count requested for an empty intersection")
        return max(road_graph.edge_data(road.eid).classification.number_of_lanes for road in self._roads)


class Intersection(IntersectionView):
    """
    Connected roads of an intersection, carrying the instructions assigned by
    the intersection handlers.
    """

    @classmethod
    def from_view(cls, view):
        return cls(ConnectedRoad.from_view(road) for road in view)


# See IntersectionHandler.get_next_intersection
IntersectionViewAndNode = namedtuple("IntersectionViewAndNode", ["intersection", "node"])
