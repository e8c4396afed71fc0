import logging

import pandas as pd

_logger = logging.getLogger(__name__)


def decision_edges(road_graph):
    """
    Edges leading into a node where the driver has a choice.
    """
    for u, v, k in road_graph.G.edges(keys=True):
        if len(road_graph.neighbors(v)) > 2:
            yield (u, v, k)


def summarize(analysis, edges=None, saverow=None):
    rows = []
    if edges is None:
        edges = decision_edges(analysis.road_graph)
    for via in edges:
        intersection = analysis.classify_edge(via)
        for road in intersection:
            if not road.entry_allowed:
                continue
            instruction = road.instruction
            rows.append({
                "node": via[1],
                "from_node": via[0],
                "to_node": road.eid[1],
                "angle": road.angle,
                "type": instruction.type.value,
                "modifier": instruction.direction_modifier.value,
                "silent": instruction.is_silent(),
            })
            if saverow:
                saverow(via, road)
    _logger.info("classified %d turns", len(rows))
    return pd.DataFrame(rows, columns=["node", "from_node", "to_node", "angle", "type", "modifier", "silent"])
