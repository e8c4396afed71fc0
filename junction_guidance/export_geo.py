import geopandas as gpd
from shapely.geometry import LineString


def _towards(origin, target, fraction):
    (x0, y0), (x1, y1) = origin, target
    return x0 + (x1 - x0) * fraction, y0 + (y1 - y0) * fraction


def turn_to_linestring(road_graph, via, eid, leg_fraction=1.0):
    """
    Polyline of a turn: along the arrival edge into the junction, then out along
    the chosen road. With leg_fraction < 1 both legs are cut short around the
    junction node, which keeps neighbouring turns apart on a map.
    Coordinates stay in the graph's CRS.
    """
    junction = road_graph.coordinate(via[1])
    start = _towards(junction, road_graph.coordinate(via[0]), leg_fraction)
    end = _towards(junction, road_graph.coordinate(eid[1]), leg_fraction)

    points = [start]
    for point in (junction, end):
        if point != points[-1]:
            points.append(point)
    return LineString(points)


def write_geojson(turns, outfile, crs="EPSG:4326"):
    """
    turns: list of (LineString, properties) pairs, one per narrated turn.
    """
    records = [dict(props, geometry=line) for line, props in turns]
    gpd.GeoDataFrame(records, geometry="geometry", crs=crs).to_file(outfile, driver="GeoJSON")
