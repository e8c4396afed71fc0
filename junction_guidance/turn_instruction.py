"""
Turn types and direction modifiers assigned to the roads of an intersection.
"""
from dataclasses import dataclass
from enum import Enum


class TurnType(str, Enum):
    INVALID = "invalid"
    NEW_NAME = "new name"
    CONTINUE = "continue"
    TURN = "turn"
    MERGE = "merge"
    ON_RAMP = "on ramp"
    OFF_RAMP = "off ramp"
    FORK = "fork"
    END_OF_ROAD = "end of road"
    NOTIFICATION = "notification"
    ENTER_ROUNDABOUT = "enter roundabout"
    EXIT_ROUNDABOUT = "exit roundabout"
    STAY_ON_ROUNDABOUT = "stay on roundabout"
    SUPPRESSED = "suppressed"
    NO_TURN = "no turn"


class DirectionModifier(str, Enum):
    UTURN = "uturn"
    SHARP_RIGHT = "sharp right"
    RIGHT = "right"
    SLIGHT_RIGHT = "slight right"
    STRAIGHT = "straight"
    SLIGHT_LEFT = "slight left"
    LEFT = "left"
    SHARP_LEFT = "sharp left"


_MIRRORED_MODIFIERS = {
    DirectionModifier.UTURN: DirectionModifier.UTURN,
    DirectionModifier.SHARP_RIGHT: DirectionModifier.SHARP_LEFT,
    DirectionModifier.RIGHT: DirectionModifier.LEFT,
    DirectionModifier.SLIGHT_RIGHT: DirectionModifier.SLIGHT_LEFT,
    DirectionModifier.STRAIGHT: DirectionModifier.STRAIGHT,
    DirectionModifier.SLIGHT_LEFT: DirectionModifier.SLIGHT_RIGHT,
    DirectionModifier.LEFT: DirectionModifier.RIGHT,
    DirectionModifier.SHARP_LEFT: DirectionModifier.SHARP_RIGHT,
}

SILENT_TURN_TYPES = {TurnType.NO_TURN, TurnType.SUPPRESSED, TurnType.STAY_ON_ROUNDABOUT}


def mirror_direction_modifier(modifier):
    return _MIRRORED_MODIFIERS[modifier]


@dataclass(frozen=True)
class TurnInstruction:
    type: TurnType = TurnType.INVALID
    direction_modifier: DirectionModifier = DirectionModifier.UTURN

    @classmethod
    def invalid(cls):
        return cls(TurnType.INVALID, DirectionModifier.UTURN)

    def mirrored(self):
        return TurnInstruction(self.type, mirror_direction_modifier(self.direction_modifier))

    def is_silent(self):
        """True for instructions that don't need to be announced."""
        return self.type in SILENT_TURN_TYPES

    def is_narratable(self):
        return self.type is not TurnType.INVALID and not self.is_silent()


def get_turn_direction(angle):
    # 0-180 are right turns, 180-360 are left turns
    if 0 < angle < 60:
        return DirectionModifier.SHARP_RIGHT
    if 60 <= angle < 140:
        return DirectionModifier.RIGHT
    if 140 <= angle < 160:
        return DirectionModifier.SLIGHT_RIGHT
    if 160 <= angle <= 200:
        return DirectionModifier.STRAIGHT
    if 200 < angle <= 220:
        return DirectionModifier.SLIGHT_LEFT
    if 220 < angle <= 300:
        return DirectionModifier.LEFT
    if 300 < angle < 360:
        return DirectionModifier.SHARP_LEFT
    return DirectionModifier.UTURN


def angle_to_direction_modifier(angle):
    """
    Coarse right/straight/left bucket, used where the finer buckets of
    get_turn_direction would be misleading (entering and leaving roundabouts).
    """
    if angle < 135:
        return DirectionModifier.RIGHT
    if angle <= 225:
        return DirectionModifier.STRAIGHT
    return DirectionModifier.LEFT
