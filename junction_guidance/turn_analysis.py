import logging

from .intersection_generator import IntersectionGenerator
from .names import SuffixTable
from .roundabout_handler import RoundaboutHandler
from .turn_handler import TurnHandler

_logger = logging.getLogger(__name__)


class TurnAnalysis:
    """
    Classifies the turns at a junction by handing it to the first handler that
    can process it.

    Parameters
    ----------
    road_graph : RoadGraph
    handlers : list of IntersectionHandler or None
        Tried in order. Defaults to roundabouts first, plain turns last.
    intersection_generator : IntersectionGenerator or None
    suffix_table : SuffixTable or None
    """

    def __init__(self, road_graph, handlers=None, intersection_generator=None, suffix_table=None):
        self.road_graph = road_graph
        self.intersection_generator = intersection_generator or IntersectionGenerator(road_graph)
        suffix_table = suffix_table or SuffixTable()
        if handlers is None:
            handlers = [
                RoundaboutHandler(road_graph, self.intersection_generator, suffix_table),
                TurnHandler(road_graph, self.intersection_generator, suffix_table),
            ]
        self.handlers = handlers

    def get_intersection(self, via_eid):
        return self.intersection_generator.get_connected_roads(via_eid[0], via_eid)

    def classify(self, node, via_eid, intersection):
        """
        Assign an instruction to every enterable road of `intersection`, the
        junction at the end of `via_eid` seen from `node`.
        """
        if not intersection.valid():
            raise ValueError(f"intersection at the end of {via_eid} is not sorted by angle")

        for handler in self.handlers:
            if handler.can_process(node, via_eid, intersection):
                _logger.debug("%s handles %s", type(handler).__name__, via_eid)
                intersection = handler(node, via_eid, intersection)
                break
        else:
            _logger.debug("no handler for %s", via_eid)

        if not intersection.valid():
            raise RuntimeError(f"classification of {via_eid} broke the angle order")
        for road in intersection:
            if not road.entry_allowed and road.instruction.is_narratable():
                raise RuntimeError(f"{road.eid} can't be entered but got {road.instruction}")
        return intersection

    def classify_edge(self, via_eid):
        return self.classify(via_eid[0], via_eid, self.get_intersection(via_eid))
