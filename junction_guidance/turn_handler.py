from .config import STRAIGHT_ANGLE, NARROW_TURN_ANGLE, GROUP_ANGLE
from .geometry import angular_deviation
from .intersection_handler import IntersectionHandler
from .turn_instruction import DirectionModifier, TurnInstruction, TurnType, get_turn_direction


class TurnHandler(IntersectionHandler):
    """
    Handles any intersection: obvious continuations, T-junctions, forks, and
    plain turns for whatever is left.
    """

    def can_process(self, node, via_eid, intersection):
        return True

    def __call__(self, node, via_eid, intersection):
        if len(intersection) == 1:
            self._assign_uturn(intersection)
        elif len(intersection) == 2:
            self._handle_two_way_turn(via_eid, intersection)
        else:
            self._handle_complex_turn(via_eid, intersection)
        return intersection

    def _assign_uturn(self, intersection):
        if intersection[0].entry_allowed:
            intersection[0].instruction = TurnInstruction(TurnType.TURN, DirectionModifier.UTURN)

    def _handle_two_way_turn(self, via_eid, intersection):
        road = intersection[1]
        if road.entry_allowed:
            instruction = self.get_instruction_for_obvious(len(intersection), via_eid, False, road)
            if instruction.type is TurnType.SUPPRESSED:
                instruction = TurnInstruction(TurnType.NO_TURN, instruction.direction_modifier)
            road.instruction = instruction
        self._assign_uturn(intersection)

    def _handle_complex_turn(self, via_eid, intersection):
        obvious = self.find_obvious_turn(via_eid, intersection)
        if obvious is not None:
            road = intersection[obvious]
            road.instruction = self.get_instruction_for_obvious(
                len(intersection), via_eid, self.is_through_street(obvious, intersection), road)
            self.assign_trivial_turns(via_eid, intersection, 1, obvious)
            self.assign_trivial_turns(via_eid, intersection, obvious + 1, len(intersection))
        elif self._is_end_of_road(intersection):
            for road in intersection[1:]:
                if road.entry_allowed:
                    road.instruction = TurnInstruction(TurnType.END_OF_ROAD, get_turn_direction(road.angle))
        else:
            fork = self._find_fork(intersection)
            if fork is None:
                self.assign_trivial_turns(via_eid, intersection, 1, len(intersection))
            else:
                begin, end = fork
                # left to right
                roads = [intersection[i] for i in reversed(range(begin, end))]
                if len(roads) == 2:
                    self.assign_fork(via_eid, *roads)
                else:
                    self.assign_three_way_fork(via_eid, *roads)
                self.assign_trivial_turns(via_eid, intersection, 1, begin)
                self.assign_trivial_turns(via_eid, intersection, end, len(intersection))
        self._assign_uturn(intersection)

    def _is_end_of_road(self, intersection):
        # T-junction: only a right and a left turn, nothing straight
        return (len(intersection) == 3
                and angular_deviation(intersection[1].angle, 90) < NARROW_TURN_ANGLE
                and angular_deviation(intersection[2].angle, 270) < NARROW_TURN_ANGLE)

    def _find_fork(self, intersection):
        """
        Range [begin, end) of two or three neighbouring enterable roads around
        straight, or None.
        """
        candidates = [i for i in range(1, len(intersection))
                      if intersection[i].entry_allowed
                      and angular_deviation(intersection[i].angle, STRAIGHT_ANGLE) < GROUP_ANGLE]
        if not 2 <= len(candidates) <= 3:
            return None
        if candidates[-1] - candidates[0] + 1 != len(candidates):
            return None
        for a, b in zip(candidates, candidates[1:]):
            if angular_deviation(intersection[a].angle, intersection[b].angle) >= GROUP_ANGLE:
                return None
        return candidates[0], candidates[-1] + 1
