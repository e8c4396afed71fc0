import logging

from .geometry import turn_angle
from .intersection import Intersection, IntersectionView, IntersectionViewData

_logger = logging.getLogger(__name__)


class IntersectionGenerator:
    """
    Builds the intersection at the end of an arrival edge and walks the graph
    over nodes that don't offer a choice.

    Parameters
    ----------
    road_graph : RoadGraph
    skip_only_artificial : bool
        Only walk over degree-two nodes that carry a signal, barrier or similar
        tag. By default every degree-two node is walked over, since none of them
        offers a choice.
    """

    def __init__(self, road_graph, skip_only_artificial=False):
        self.road_graph = road_graph
        self.skip_only_artificial = skip_only_artificial

    def _passes_through(self, node):
        if len(self.road_graph.neighbors(node)) != 2:
            return False
        return not self.skip_only_artificial or self.road_graph.is_artificial(node)

    def step(self, from_node, via_eid):
        """
        Advance one node: from the target of `via_eid`, take the first road that
        doesn't lead back to `from_node`. Returns (node, eid) or None.
        """
        node = self.road_graph.target(via_eid)
        for eid in self.road_graph.roads_at(node):
            if eid[1] != from_node:
                return node, eid
        return None

    def skip_degree_two_nodes(self, from_node, via_eid):
        """
        Follow `via_eid` over degree-two nodes. Returns the (node, eid) pair whose
        edge leads into the next node offering a choice, a dead end, or back into
        a node already visited.
        """
        query_node, edge = from_node, via_eid
        visited = set()
        while query_node not in visited and self._passes_through(self.road_graph.target(edge)):
            visited.add(query_node)
            next_step = self.step(query_node, edge)
            if next_step is None:
                break
            query_node, edge = next_step
        return query_node, edge

    def _find_uturn(self, from_node, via_eid, roads):
        turn_node = self.road_graph.target(via_eid)
        exact = (turn_node, from_node, via_eid[2])
        if exact in roads:
            return exact
        return next((eid for eid in roads if eid[1] == from_node), None)

    def get_intersection_view(self, from_node, via_eid):
        """
        All roads at the target of `via_eid`, sorted by turn angle. The road back
        to `from_node` is the u-turn at angle 0, only allowed at dead ends.
        """
        turn_node = self.road_graph.target(via_eid)
        in_bearing = self.road_graph.bearing(via_eid)
        roads = self.road_graph.roads_at(turn_node)
        uturn = self._find_uturn(from_node, via_eid, roads)
        is_dead_end = len(self.road_graph.neighbors(turn_node)) == 1

        view = []
        for eid in roads:
            data = self.road_graph.edge_data(eid)
            bearing = self.road_graph.bearing(eid)
            if eid == uturn:
                angle = 0.0
                entry_allowed = is_dead_end and not data.reversed
            else:
                angle = turn_angle(in_bearing, bearing)
                entry_allowed = not data.reversed
            view.append(IntersectionViewData(eid, bearing, data.length, entry_allowed, angle))

        view.sort(key=lambda road: (road.angle, road.eid != uturn))
        _logger.debug("intersection at %s via %s: %d roads", turn_node, via_eid, len(view))
        return IntersectionView(view)

    def get_connected_roads(self, from_node, via_eid):
        return Intersection.from_view(self.get_intersection_view(from_node, via_eid))
