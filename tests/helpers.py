"""Small street graphs shared by the tests."""

import math

import networkx as nx

from junction_guidance.intersection_generator import IntersectionGenerator
from junction_guidance.road_graph import RoadGraph
from junction_guidance.turn_analysis import TurnAnalysis
from junction_guidance.turn_handler import TurnHandler

ORIGIN = 0
CENTER = 1
VIA = (ORIGIN, CENTER, 0)


def _position(bearing, distance=0.001):
    rad = math.radians(bearing)
    return math.sin(rad) * distance, math.cos(rad) * distance


def make_arm(angle, name="", highway="residential", access="both", length=100.0, **attrs):
    """One road at the junction, placed at `angle` as seen from the arrival edge.

    access: "both", "out" (one-way away from the junction) or "in" (one-way
    towards the junction).
    """
    return dict(angle=angle, name=name, highway=highway, access=access, length=length, **attrs)


def make_junction(arms, via_name="Main Street", via_highway="primary", via_oneway=False,
                  via_length=100.0, **via_attrs):
    """Junction at CENTER, approached from ORIGIN heading north.

    Arms get node ids 2, 3, ... in the order given.
    """
    G = nx.MultiDiGraph(crs="EPSG:4326")
    G.add_node(CENTER, x=0.0, y=0.0)
    x, y = _position(180.0)
    G.add_node(ORIGIN, x=x, y=y)

    via = dict(name=via_name, highway=via_highway, length=via_length, **via_attrs)
    G.add_edge(ORIGIN, CENTER, key=0, bearing=0.0, **via)
    if not via_oneway:
        G.add_edge(CENTER, ORIGIN, key=0, bearing=180.0, **via)

    for node, arm in enumerate(arms, start=2):
        attrs = dict(arm)
        angle = attrs.pop("angle")
        access = attrs.pop("access")
        bearing = (180.0 - angle) % 360
        x, y = _position(bearing)
        G.add_node(node, x=x, y=y)
        if access in ("both", "out"):
            G.add_edge(CENTER, node, key=0, bearing=bearing, **attrs)
        if access in ("both", "in"):
            G.add_edge(node, CENTER, key=0, bearing=(bearing + 180.0) % 360, **attrs)
    return G


def make_signal_chain(signals=3, branching=True, artificial=True):
    """Straight street north from node 0 over `signals` degree-two nodes.

    With `branching` the street ends in a junction offering north and east,
    otherwise in a dead end.
    """
    G = nx.MultiDiGraph(crs="EPSG:4326")
    last = signals + 1
    for i in range(last + 1):
        attrs = {"highway": "traffic_signals"} if artificial and 0 < i < last else {}
        G.add_node(i, x=0.0, y=i * 0.001, **attrs)
    street = dict(name="Main Street", highway="primary", length=50.0)
    for i in range(last):
        G.add_edge(i, i + 1, key=0, bearing=0.0, **street)
        G.add_edge(i + 1, i, key=0, bearing=180.0, **street)
    if branching:
        north, east = last + 1, last + 2
        G.add_node(north, x=0.0, y=(last + 1) * 0.001)
        G.add_node(east, x=0.001, y=last * 0.001)
        G.add_edge(last, north, key=0, bearing=0.0, **street)
        G.add_edge(north, last, key=0, bearing=180.0, **street)
        cross = dict(name="Cross Street", highway="secondary", length=50.0)
        G.add_edge(last, east, key=0, bearing=90.0, **cross)
        G.add_edge(east, last, key=0, bearing=270.0, **cross)
    return G


def make_handler(G, **kwargs):
    road_graph = RoadGraph(G)
    return TurnHandler(road_graph, IntersectionGenerator(road_graph), **kwargs)


def make_analysis(G, **kwargs):
    return TurnAnalysis(RoadGraph(G), **kwargs)


def road_to(intersection, node):
    return intersection.find_road_for_eid((CENTER, node, 0))
