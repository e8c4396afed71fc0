"""
Shared turn classification logic.

Intersection handlers assign turn instructions to the roads of an intersection.
Each handler decides whether it can deal with a given intersection
(`can_process`) and, if so, classifies it (`__call__`). The base class holds the
decisions every handler needs: the basic turn type of a road, the obvious
continuation of an intersection, forks, and the lookahead over nodes that don't
offer a choice.
"""
import logging
from abc import ABC, abstractmethod

from .config import (
    STRAIGHT_ANGLE, MAXIMAL_ALLOWED_NO_TURN_DEVIATION, NARROW_TURN_ANGLE, GROUP_ANGLE,
    FUZZY_ANGLE_DIFFERENCE, DISTINCTION_RATIO, PRIORITY_DISTINCTION_FACTOR,
    MAX_COLLAPSE_DISTANCE, FORK_CENTER_MARGIN,
)
from .geometry import angular_deviation
from .intersection import IntersectionViewAndNode
from .names import SuffixTable, requires_name_announced
from .turn_instruction import DirectionModifier, TurnInstruction, TurnType, get_turn_direction

_logger = logging.getLogger(__name__)


def obvious_by_road_class(in_classification, obvious_candidate, compare_candidate):
    # lower numbers are of higher priority
    has_high_priority = PRIORITY_DISTINCTION_FACTOR * obvious_candidate.priority < compare_candidate.priority
    continues_on_same_class = in_classification == obvious_candidate
    return ((has_high_priority and continues_on_same_class)
            or (not obvious_candidate.is_low_priority() and compare_candidate.is_low_priority()))


def _deviation(road):
    return angular_deviation(road.angle, STRAIGHT_ANGLE)


class IntersectionHandler(ABC):
    def __init__(self, road_graph, intersection_generator, suffix_table=None,
                 fork_center_margin=FORK_CENTER_MARGIN):
        self.road_graph = road_graph
        self.intersection_generator = intersection_generator
        self.suffix_table = suffix_table or SuffixTable()
        self.fork_center_margin = fork_center_margin

    @abstractmethod
    def can_process(self, node, via_eid, intersection):
        """Check whether the handler can deal with the intersection."""

    @abstractmethod
    def __call__(self, node, via_eid, intersection):
        """Assign instructions to the roads of the intersection and return it."""

    def _requires_name_announced(self, from_data, to_data):
        if from_data.name_id == to_data.name_id:
            return False
        return requires_name_announced(from_data.name, from_data.ref, to_data.name, to_data.ref,
                                       self.suffix_table)

    def _requires_announcement(self, from_data, to_data):
        return not from_data.can_combine_with(to_data)

    def find_basic_turn_type(self, via_edge, road):
        """
        Coarse turn type of `road`: ramps, continuing on the same street, or a turn.
        """
        in_data = self.road_graph.edge_data(via_edge)
        out_data = self.road_graph.edge_data(road.eid)

        on_ramp = in_data.classification.is_ramp_class()
        onto_ramp = out_data.classification.is_ramp_class()
        if not on_ramp and onto_ramp:
            return TurnType.OFF_RAMP if in_data.classification.motorway_class else TurnType.ON_RAMP

        # turning back is a turn, whatever the names say
        if get_turn_direction(road.angle) is DirectionModifier.UTURN:
            return TurnType.TURN

        same_name = not self._requires_name_announced(in_data, out_data)
        if in_data.has_name() and out_data.has_name() and same_name:
            return TurnType.CONTINUE
        return TurnType.TURN

    def get_instruction_for_obvious(self, num_roads, via_edge, through_street, road):
        """
        Instruction for a road already known to be the obvious choice.
        `through_street` tells whether the road continues on the other side of the
        intersection (turning onto it is a merge).
        """
        turn_type = self.find_basic_turn_type(via_edge, road)
        direction = get_turn_direction(road.angle)
        in_data = self.road_graph.edge_data(via_edge)
        out_data = self.road_graph.edge_data(road.eid)

        if turn_type in (TurnType.ON_RAMP, TurnType.OFF_RAMP):
            return TurnInstruction(turn_type, direction)

        if angular_deviation(road.angle, 0) < 0.01:
            return TurnInstruction(TurnType.TURN, DirectionModifier.UTURN)

        if turn_type is TurnType.TURN:
            if self._requires_name_announced(in_data, out_data):
                if through_street:
                    return TurnInstruction(TurnType.MERGE, direction)
                return TurnInstruction(TurnType.NEW_NAME, direction)
            if in_data.travel_mode == out_data.travel_mode:
                return TurnInstruction(TurnType.SUPPRESSED, direction)
            return TurnInstruction(TurnType.NOTIFICATION, direction)

        if in_data.travel_mode != out_data.travel_mode:
            return TurnInstruction(TurnType.NOTIFICATION, direction)
        if num_roads > 2:
            return TurnInstruction(TurnType.SUPPRESSED, direction)
        return TurnInstruction(TurnType.NO_TURN, direction)

    def find_obvious_turn(self, via_edge, intersection):
        """
        Index of the road that can be followed without announcing a decision, or
        None if no road stands out.

        Candidates are compared by angle to straight, by road class and by name.
        A single enterable road is always obvious.
        """
        allowed = [i for i in range(1, len(intersection)) if intersection[i].entry_allowed]
        if not allowed:
            return None
        if len(allowed) == 1:
            return allowed[0]

        graph = self.road_graph
        in_data = graph.edge_data(via_edge)
        in_classification = in_data.classification

        # index 0 is the u-turn and doubles as "nothing found"
        best, best_deviation = 0, 180.0
        best_continue, best_continue_deviation = 0, 180.0

        for i in range(1, len(intersection)):
            road = intersection[i]
            if not road.entry_allowed:
                continue
            deviation = _deviation(road)
            out_data = graph.edge_data(road.eid)
            out_classification = out_data.classification

            # the continuation keeps the street name, class only ranks the candidates
            continue_class = graph.edge_data(intersection[best_continue].eid).classification
            if out_data.name_id == in_data.name_id and (
                    best_continue == 0
                    or (continue_class.priority > out_classification.priority
                        and in_classification != continue_class)
                    or (deviation < best_continue_deviation and out_classification == continue_class)
                    or (continue_class != in_classification and out_classification == continue_class)):
                best_continue, best_continue_deviation = i, deviation

            current_best_class = graph.edge_data(intersection[best].eid).classification

            # don't prefer low priority classes
            if best != 0 and out_classification.is_low_priority() and not current_best_class.is_low_priority():
                continue

            is_better_choice_by_priority = best == 0 or obvious_by_road_class(
                in_classification, out_classification, current_best_class)
            other_is_better_choice_by_priority = best != 0 and obvious_by_road_class(
                in_classification, current_best_class, out_classification)

            if (not other_is_better_choice_by_priority and deviation < best_deviation) \
                    or is_better_choice_by_priority:
                best, best_deviation = i, deviation

        # missing names are no evidence of a continuing road
        if not in_data.has_name():
            best_continue = 0

        if best == 0:
            return None

        continue_names, valid_continue_names = 0, 0
        if in_data.has_name():
            for road in intersection[1:]:
                if graph.edge_data(road.eid).name_id == in_data.name_id:
                    continue_names += 1
                    if road.entry_allowed:
                        valid_continue_names += 1

        best_data = graph.edge_data(intersection[best].eid)

        # the best angle goes straight, but the road itself turns
        if best_continue != 0 and best != best_continue \
                and best_deviation < MAXIMAL_ALLOWED_NO_TURN_DEVIATION \
                and graph.edge_data(intersection[best_continue].eid).classification == best_data.classification:
            return None

        all_continues_are_narrow = in_data.has_name() and sum(
            1 for road in intersection[1:]
            if graph.edge_data(road.eid).name_id == in_data.name_id
            and _deviation(road) < NARROW_TURN_ANGLE) == continue_names

        has_no_obvious_continue = (
            best_continue == 0
            or (not all_continues_are_narrow and continue_names >= 2 and len(intersection) >= 4)
            or (valid_continue_names >= 2 and best_continue_deviation >= 2 * NARROW_TURN_ANGLE)
            or (best_deviation != best_continue_deviation and best_deviation < FUZZY_ANGLE_DIFFERENCE
                and not best_data.classification.is_ramp_class()))

        if has_no_obvious_continue:
            return self._obvious_by_distinction(in_data, intersection, best, best_deviation)
        return self._obvious_continue(via_edge, in_data, intersection, best_continue)

    def _obvious_by_distinction(self, in_data, intersection, best, best_deviation):
        graph = self.road_graph
        best_data = graph.edge_data(intersection[best].eid)
        left_index = (best + 1) % len(intersection)
        right_index = best - 1
        left_deviation = _deviation(intersection[left_index])
        right_deviation = _deviation(intersection[right_index])

        if best_deviation < MAXIMAL_ALLOWED_NO_TURN_DEVIATION \
                and min(left_deviation, right_deviation) > FUZZY_ANGLE_DIFFERENCE:
            return best

        obvious_to_left = left_index == 0 or obvious_by_road_class(
            in_data.classification, best_data.classification,
            graph.edge_data(intersection[left_index].eid).classification)
        obvious_to_right = right_index == 0 or obvious_by_road_class(
            in_data.classification, best_data.classification,
            graph.edge_data(intersection[right_index].eid).classification)

        # a nearly straight neighbour keeps a turn that isn't narrow from being obvious
        def is_narrow(index):
            return _deviation(intersection[index]) <= FUZZY_ANGLE_DIFFERENCE and (
                best_deviation > NARROW_TURN_ANGLE or intersection[index].entry_allowed)

        if is_narrow(right_index) and not obvious_to_right:
            return None
        if is_narrow(left_index) and not obvious_to_left:
            return None

        def is_distinct(index, deviation):
            if best_deviation == 0:
                ratio_ok = deviation > 0
            else:
                ratio_ok = deviation / best_deviation >= DISTINCTION_RATIO
            return ratio_ok or (deviation > best_deviation and not intersection[index].entry_allowed)

        distinct_to_left = is_distinct(left_index, left_deviation)
        distinct_to_right = is_distinct(right_index, right_deviation)

        if (distinct_to_left or obvious_to_left) and (distinct_to_right or obvious_to_right):
            return best

        # more lanes than every remaining competitor breaks the tie
        competitors = [index for index, stands_out in ((left_index, distinct_to_left or obvious_to_left),
                                                       (right_index, distinct_to_right or obvious_to_right))
                       if not stands_out]
        best_lanes = best_data.classification.number_of_lanes
        if best_lanes > 0 and all(
                best_lanes > graph.edge_data(intersection[index].eid).classification.number_of_lanes
                for index in competitors):
            return best
        return None

    def _obvious_continue(self, via_edge, in_data, intersection, best_continue):
        graph = self.road_graph
        continue_road = intersection[best_continue]
        continue_data = graph.edge_data(continue_road.eid)
        deviation = _deviation(continue_road)
        if deviation < 1:
            return best_continue

        # check if any other similar best continues exist
        for i in range(1, len(intersection)):
            road = intersection[i]
            if i == best_continue or not road.entry_allowed:
                continue
            turn_data = graph.edge_data(road.eid)

            # the continuing road is obvious by class, this road doesn't compete
            if obvious_by_road_class(in_data.classification, continue_data.classification,
                                     turn_data.classification):
                continue

            # a ramp next to a continuing road doesn't compete either
            if turn_data.classification.is_ramp_class() and deviation < GROUP_ANGLE:
                continue

            turn_deviation = _deviation(road)
            if turn_deviation < FUZZY_ANGLE_DIFFERENCE:
                return None

            deviation_ratio = turn_deviation / deviation
            # a continuing road needs less distinction than other roads
            if deviation_ratio < DISTINCTION_RATIO / 1.5:
                return None

            # ... unless another road of the same name is close by
            if turn_data.name_id == continue_data.name_id and deviation_ratio < 1.5 * DISTINCTION_RATIO:
                return None

        if self._continues_segregated_intersection(via_edge, intersection, continue_road, continue_data):
            return None
        return best_continue

    def _continues_segregated_intersection(self, via_edge, intersection, continue_road, continue_data):
        """
        A very short arrival segment may be the inner part of a segregated
        intersection. If the intersection just behind offers a road in the same
        direction as the continuing one, the continuation isn't obvious.
        """
        if intersection[0].segment_length >= MAX_COLLAPSE_DISTANCE:
            return False

        node_at_intersection = self.road_graph.target(via_edge)
        previous = self.get_next_intersection(node_at_intersection, intersection[0].eid)
        if previous is None or previous.node == node_at_intersection:
            return False

        # looking backwards, a similar angle means a road running the opposite way
        for comparison_road in previous.intersection:
            turn_data = self.road_graph.edge_data(comparison_road.eid)
            if _deviation(comparison_road) > GROUP_ANGLE \
                    and angular_deviation(comparison_road.angle, continue_road.angle) < FUZZY_ANGLE_DIFFERENCE \
                    and not turn_data.reversed and continue_data.can_combine_with(turn_data):
                return True
        return False

    def _fork_instruction(self, via_edge, road, other):
        # `road` is the left side of a two-way fork, `other` the right side
        in_data = self.road_graph.edge_data(via_edge)
        road_data = self.road_graph.edge_data(road.eid)
        other_data = self.road_graph.edge_data(other.eid)
        low_priority_road = road_data.classification.is_low_priority()
        low_priority_other = other_data.classification.is_low_priority()

        if _deviation(road) < MAXIMAL_ALLOWED_NO_TURN_DEVIATION and _deviation(other) > FUZZY_ANGLE_DIFFERENCE:
            # this side is actually straight
            if not self._requires_announcement(in_data, road_data):
                return TurnInstruction(TurnType.SUPPRESSED, DirectionModifier.STRAIGHT)
            if low_priority_other and not low_priority_road:
                return self.get_instruction_for_obvious(3, via_edge, False, road)
            if low_priority_road and not low_priority_other:
                return TurnInstruction(self.find_basic_turn_type(via_edge, road), DirectionModifier.SLIGHT_LEFT)
            return TurnInstruction(TurnType.FORK, DirectionModifier.SLIGHT_LEFT)

        if _deviation(other) < MAXIMAL_ALLOWED_NO_TURN_DEVIATION and _deviation(road) > FUZZY_ANGLE_DIFFERENCE:
            # the other side is straight
            if self._requires_announcement(in_data, other_data) and low_priority_road == low_priority_other:
                return TurnInstruction(TurnType.FORK, DirectionModifier.SLIGHT_LEFT)
            return TurnInstruction(self.find_basic_turn_type(via_edge, road), DirectionModifier.SLIGHT_LEFT)

        if low_priority_other and not low_priority_road:
            return TurnInstruction(TurnType.SUPPRESSED, DirectionModifier.SLIGHT_LEFT)
        if low_priority_road and not low_priority_other:
            return TurnInstruction(TurnType.TURN, DirectionModifier.SLIGHT_LEFT)
        return TurnInstruction(TurnType.FORK, DirectionModifier.SLIGHT_LEFT)

    def assign_fork(self, via_edge, left, right):
        """
        Two roads splitting around straight. The right side is decided on mirrored
        copies, so both sides share the same rules.
        """
        left_instruction = self._fork_instruction(via_edge, left, right)
        right_instruction = self._fork_instruction(via_edge, right.mirrored(), left.mirrored()).mirrored()
        if left.entry_allowed:
            left.instruction = left_instruction
        if right.entry_allowed:
            right.instruction = right_instruction

    def assign_three_way_fork(self, via_edge, left, center, right):
        """
        Three roads splitting around straight. The center road only forks straight
        if it is closer to straight than both sides by `fork_center_margin`;
        otherwise the two roads closest to straight form the fork and the third
        one is a regular turn.
        """
        if left.entry_allowed and center.entry_allowed and right.entry_allowed:
            if _deviation(center) + self.fork_center_margin < min(_deviation(left), _deviation(right)):
                left.instruction = TurnInstruction(TurnType.FORK, DirectionModifier.SLIGHT_LEFT)
                in_data = self.road_graph.edge_data(via_edge)
                center_data = self.road_graph.edge_data(center.eid)
                if _deviation(center) < MAXIMAL_ALLOWED_NO_TURN_DEVIATION \
                        and not self._requires_announcement(in_data, center_data):
                    center.instruction = TurnInstruction(TurnType.SUPPRESSED, DirectionModifier.STRAIGHT)
                else:
                    center.instruction = TurnInstruction(TurnType.FORK, DirectionModifier.STRAIGHT)
                right.instruction = TurnInstruction(TurnType.FORK, DirectionModifier.SLIGHT_RIGHT)
            else:
                roads = [left, center, right]
                outlier = max(roads, key=_deviation)
                fork_left, fork_right = [road for road in roads if road is not outlier]
                self.assign_fork(via_edge, fork_left, fork_right)
                self._assign_trivial_turn(via_edge, outlier)
        elif left.entry_allowed:
            if right.entry_allowed:
                self.assign_fork(via_edge, left, right)
            elif center.entry_allowed:
                self.assign_fork(via_edge, left, center)
            else:
                self._assign_trivial_turn(via_edge, left)
        elif right.entry_allowed:
            if center.entry_allowed:
                self.assign_fork(via_edge, center, right)
            else:
                self._assign_trivial_turn(via_edge, right)
        elif center.entry_allowed:
            self._assign_trivial_turn(via_edge, center)

    def _assign_trivial_turn(self, via_edge, road):
        road.instruction = TurnInstruction(self.find_basic_turn_type(via_edge, road),
                                           get_turn_direction(road.angle))

    def assign_trivial_turns(self, via_edge, intersection, begin, end):
        """
        Classify roads [begin, end) by basic turn type and angle alone.
        """
        for index in range(begin, end):
            if intersection[index].entry_allowed:
                self._assign_trivial_turn(via_edge, intersection[index])

    def is_through_street(self, index, intersection):
        """
        Whether the road at `index` continues on the opposite side of the
        intersection, under the same name and class.
        """
        data_at_index = self.road_graph.edge_data(intersection[index].eid)
        if not data_at_index.has_name():
            return False

        # a through street cannot start at our own position
        for road_index in range(1, len(intersection)):
            if road_index == index:
                continue
            road = intersection[road_index]
            road_data = self.road_graph.edge_data(road.eid)
            is_nearly_straight = angular_deviation(road.angle, intersection[index].angle) \
                > STRAIGHT_ANGLE - FUZZY_ANGLE_DIFFERENCE
            if is_nearly_straight and road_data.name_id == data_at_index.name_id \
                    and road_data.classification == data_at_index.classification:
                return True
        return False

    def get_next_intersection(self, at, via):
        """
        Skip over nodes without a choice (traffic lights, barriers, ...).

            a ... tl ... b .. c
                         .
                         .
                         d

        Starting at `a` via the edge towards `tl`, returns the intersection at `b`
        together with `b`, or None if the walk ends at a dead end or runs in a
        circle.
        """
        node, edge = self.intersection_generator.skip_degree_two_nodes(at, via)
        intersection = self.intersection_generator.get_intersection_view(node, edge)
        if len(intersection) <= 2:
            _logger.debug("no intersection ahead of %s via %s", at, via)
            return None
        return IntersectionViewAndNode(intersection, self.road_graph.target(edge))
