import math
from dataclasses import dataclass, field

import osmnx as ox

from .config import (
    PLACE, HIGHWAY_CLASSES, LOW_PRIORITY_CLASSES, PRIORITY_CONNECTIVITY,
    ARTIFICIAL_NODE_TAGS, DEFAULT_TRAVEL_MODE,
)
from .geometry import calculate_bearing, reverse_bearing
from .names import NameTable

EMPTY_NAME_ID = ("", "")


def _first(value):
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _parse_lanes(value):
    if value is None:
        return 0
    if isinstance(value, (list, tuple)):
        return max((_parse_lanes(v) for v in value), default=0)
    if isinstance(value, float) and math.isnan(value):
        return 0
    counts = []
    for part in str(value).replace("|", ";").split(";"):
        try:
            counts.append(int(float(part)))
        except ValueError:
            continue
    return max(counts, default=0)


@dataclass(frozen=True)
class RoadClassification:
    priority: int = PRIORITY_CONNECTIVITY
    motorway_class: bool = False
    link_class: bool = False
    # lanes don't change the class of a road
    number_of_lanes: int = field(default=0, compare=False)

    @classmethod
    def from_tags(cls, highway, lanes=None):
        priority, motorway_class, link_class = HIGHWAY_CLASSES.get(
            _first(highway), (PRIORITY_CONNECTIVITY, False, False))
        return cls(priority, motorway_class, link_class, _parse_lanes(lanes))

    def is_ramp_class(self):
        return self.motorway_class and self.link_class

    def is_low_priority(self):
        return self.priority in LOW_PRIORITY_CLASSES


@dataclass(frozen=True)
class EdgeData:
    name: str = ""
    ref: str = ""
    classification: RoadClassification = field(default_factory=RoadClassification)
    reversed: bool = False     # exists only in the opposite direction, may not be entered
    travel_mode: str = DEFAULT_TRAVEL_MODE
    roundabout: bool = False
    length: float = 0.0

    @property
    def name_id(self):
        return (self.name, self.ref)

    def has_name(self):
        return self.name_id != EMPTY_NAME_ID

    def can_combine_with(self, other):
        return (self.reversed == other.reversed
                and self.name_id == other.name_id
                and self.classification == other.classification
                and self.travel_mode == other.travel_mode)


class RoadGraph:
    """
    Read-only view on a street graph (OSMnx MultiDiGraph) as seen by turn guidance.

    Edges are addressed by (u, v, k). Every road at a node is listed, including
    one-way roads leading into the node: those are addressed from the node
    outwards and flagged as `reversed`.
    """

    def __init__(self, G, name_table=None):
        self.G = G
        self.name_table = name_table or NameTable()
        self._edge_data = {}

    def _attributes(self, eid):
        u, v, k = eid
        if self.G.has_edge(u, v, k):
            return self.G.edges[u, v, k], False
        # raises KeyError for edges that don't exist in either direction
        return self.G.edges[v, u, k], True

    def target(self, eid):
        return eid[1]

    def edge_data(self, eid):
        if eid not in self._edge_data:
            attrs, is_reversed = self._attributes(eid)
            self._edge_data[eid] = EdgeData(
                name=self.name_table.name_for(attrs),
                ref=self.name_table.ref_for(attrs),
                classification=RoadClassification.from_tags(attrs.get("highway"), attrs.get("lanes")),
                reversed=is_reversed,
                travel_mode="ferry" if _first(attrs.get("route")) == "ferry" else DEFAULT_TRAVEL_MODE,
                roundabout=_first(attrs.get("junction")) in {"roundabout", "circular"},
                length=float(attrs.get("length", 0.0)),
            )
        return self._edge_data[eid]

    def bearing(self, eid):
        attrs, is_reversed = self._attributes(eid)
        bearing = attrs.get("bearing")
        if bearing is None or math.isnan(bearing):
            u, v, _ = eid
            return calculate_bearing(self.coordinate(u), self.coordinate(v))
        return reverse_bearing(bearing) if is_reversed else float(bearing) % 360

    def roads_at(self, node):
        roads = [(node, w, k) for _, w, k in self.G.out_edges(node, keys=True)]
        for w, _, k in self.G.in_edges(node, keys=True):
            if not self.G.has_edge(node, w, k):
                roads.append((node, w, k))
        return roads

    def neighbors(self, node):
        return set(self.G.successors(node)) | set(self.G.predecessors(node))

    def coordinate(self, node):
        data = self.G.nodes[node]
        return data["x"], data["y"]

    def is_artificial(self, node):
        data = self.G.nodes[node]
        return _first(data.get("highway")) in ARTIFICIAL_NODE_TAGS or bool(data.get("barrier"))


def build_graph(place=PLACE):
    # 1. Download the drivable network (unprojected, lat/lon coordinates)
    G = ox.graph_from_place(place, network_type="drive")

    # 2. Add edge bearings, turn angles are computed from these
    G = ox.add_edge_bearings(G)
    return G

