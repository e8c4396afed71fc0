import osmnx as ox

from .config import STRAIGHT_ANGLE


def angular_deviation(angle, from_angle):
    # Circular distance folded into [0..180]
    deviation = abs(angle - from_angle)
    return min(360 - deviation, deviation)


def reverse_bearing(bearing):
    return (bearing + 180) % 360


def turn_angle(in_bearing, out_bearing):
    """
    Angle of a turn relative to the arrival direction, in [0..360).
    0 is a u-turn, 180 goes straight, below 180 turns right, above 180 turns left.
    """
    return (STRAIGHT_ANGLE - out_bearing + in_bearing) % 360


def calculate_bearing(from_xy, to_xy):
    """
    Compass bearing between two (x=lon, y=lat) coordinates.
    """
    (x1, y1), (x2, y2) = from_xy, to_xy
    return float(ox.bearing.calculate_bearing(y1, x1, y2, x2)) % 360
