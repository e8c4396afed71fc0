from .intersection_handler import IntersectionHandler
from .turn_instruction import TurnInstruction, TurnType, angle_to_direction_modifier, get_turn_direction


class RoundaboutHandler(IntersectionHandler):
    """
    Entering, staying on and leaving roundabouts (junction=roundabout/circular).
    """

    def can_process(self, node, via_eid, intersection):
        if self.road_graph.edge_data(via_eid).roundabout:
            return True
        return any(self.road_graph.edge_data(road.eid).roundabout for road in intersection[1:])

    def __call__(self, node, via_eid, intersection):
        on_roundabout = self.road_graph.edge_data(via_eid).roundabout
        for road in intersection[1:]:
            if not road.entry_allowed:
                continue
            onto_roundabout = self.road_graph.edge_data(road.eid).roundabout
            if on_roundabout and onto_roundabout:
                road.instruction = TurnInstruction(TurnType.STAY_ON_ROUNDABOUT, get_turn_direction(road.angle))
            elif on_roundabout:
                road.instruction = TurnInstruction(TurnType.EXIT_ROUNDABOUT, angle_to_direction_modifier(road.angle))
            elif onto_roundabout:
                road.instruction = TurnInstruction(TurnType.ENTER_ROUNDABOUT, angle_to_direction_modifier(road.angle))
            else:
                self._assign_trivial_turn(via_eid, road)
        return intersection
