import logging

from .config import PLACE, ROUTES_DIR, SUMMARIES_DIR
from .export_geo import turn_to_linestring, write_geojson
from .road_graph import RoadGraph, build_graph
from .summary import summarize
from .turn_analysis import TurnAnalysis


def ensure_output_dirs():
    ROUTES_DIR.mkdir(parents=True, exist_ok=True)
    SUMMARIES_DIR.mkdir(parents=True, exist_ok=True)


def run(place=PLACE):
    logging.basicConfig(level=logging.INFO)
    ensure_output_dirs()
    road_graph = RoadGraph(build_graph(place))
    analysis = TurnAnalysis(road_graph)

    narrated = []

    def collect_narrated(via, road):
        if road.instruction.is_narratable():
            narrated.append((
                turn_to_linestring(road_graph, via, road.eid, leg_fraction=0.5),
                {
                    "node": via[1],
                    "angle": round(road.angle, 1),
                    "type": road.instruction.type.value,
                    "modifier": road.instruction.direction_modifier.value,
                },
            ))

    df = summarize(analysis, saverow=collect_narrated)

    out_csv = SUMMARIES_DIR / "turn_classification.csv"
    df.to_csv(out_csv, index=False)

    out_geo = ROUTES_DIR / "narrated_turns.geojson"
    if narrated:
        write_geojson(narrated, out_geo, crs=road_graph.G.graph.get("crs", "EPSG:4326"))

    print("Classified", len(df), "turns, wrote:", out_csv, out_geo)


if __name__ == "__main__":
    run()
