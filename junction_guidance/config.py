from pathlib import Path

# Study area passed to osmnx.graph_from_place
PLACE = "Tashkent, Uzbekistan"

# Angle thresholds (degrees); 0 is a u-turn, 180 goes straight
STRAIGHT_ANGLE = 180
MAXIMAL_ALLOWED_NO_TURN_DEVIATION = 3   # deviation from straight that still counts as straight
NARROW_TURN_ANGLE = 40
GROUP_ANGLE = 60
FUZZY_ANGLE_DIFFERENCE = 20             # roads closer than this are hard to tell apart
DISTINCTION_RATIO = 2

# A road is obvious by class if its priority is at least this much better
PRIORITY_DISTINCTION_FACTOR = 2

# Arrival segments shorter than this (meters) may be part of a segregated intersection
MAX_COLLAPSE_DISTANCE = 30

# Three-way forks: the center road has to be this much closer to straight
# than both sides, otherwise the closest two roads form the fork
FORK_CENTER_MARGIN = 10

# Road priorities (lower is more important)
PRIORITY_MOTORWAY = 0
PRIORITY_TRUNK = 2
PRIORITY_PRIMARY = 4
PRIORITY_SECONDARY = 6
PRIORITY_TERTIARY = 8
PRIORITY_MAIN_RESIDENTIAL = 10
PRIORITY_SIDE_RESIDENTIAL = 11
PRIORITY_ALLEY = 12
PRIORITY_PARKING = 13
PRIORITY_LINK_ROAD = 14
PRIORITY_UNCLASSIFIED = 15
PRIORITY_BIKE_PATH = 16
PRIORITY_FOOT_PATH = 18
PRIORITY_CONNECTIVITY = 31

LOW_PRIORITY_CLASSES = {
    PRIORITY_ALLEY,
    PRIORITY_PARKING,
    PRIORITY_BIKE_PATH,
    PRIORITY_FOOT_PATH,
    PRIORITY_CONNECTIVITY,
}

# OSM highway tag -> (priority, motorway class, link class)
HIGHWAY_CLASSES = {
    "motorway": (PRIORITY_MOTORWAY, True, False),
    "motorway_link": (PRIORITY_LINK_ROAD, True, True),
    "trunk": (PRIORITY_TRUNK, True, False),
    "trunk_link": (PRIORITY_LINK_ROAD, True, True),
    "primary": (PRIORITY_PRIMARY, False, False),
    "primary_link": (PRIORITY_LINK_ROAD, False, True),
    "secondary": (PRIORITY_SECONDARY, False, False),
    "secondary_link": (PRIORITY_LINK_ROAD, False, True),
    "tertiary": (PRIORITY_TERTIARY, False, False),
    "tertiary_link": (PRIORITY_LINK_ROAD, False, True),
    "unclassified": (PRIORITY_UNCLASSIFIED, False, False),
    "residential": (PRIORITY_SIDE_RESIDENTIAL, False, False),
    "living_street": (PRIORITY_MAIN_RESIDENTIAL, False, False),
    "service": (PRIORITY_ALLEY, False, False),
    "track": (PRIORITY_CONNECTIVITY, False, False),
    "cycleway": (PRIORITY_BIKE_PATH, False, False),
    "footway": (PRIORITY_FOOT_PATH, False, False),
    "pedestrian": (PRIORITY_FOOT_PATH, False, False),
}

# Node tags that mark a node without routing significance
ARTIFICIAL_NODE_TAGS = {
    "traffic_signals",
    "stop",
    "give_way",
    "crossing",
    "speed_camera",
}

# Street name prefixes/suffixes that don't change the identity of a street
STREET_NAME_SUFFIXES = {
    "n", "ne", "e", "se", "s", "sw", "w", "nw",
    "north", "south", "west", "east",
    "nor", "sou", "we", "ea",
}

DEFAULT_TRAVEL_MODE = "driving"

# I/O
DATA_DIR = Path("data")
OUTPUTS = DATA_DIR / "outputs"
ROUTES_DIR = OUTPUTS / "routes"
SUMMARIES_DIR = OUTPUTS / "summaries"
