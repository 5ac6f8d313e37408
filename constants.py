# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They describe the fixed layout of the circuit (conductor, battery, switch)
and rendering properties. Tunable rates and population sizes live in
config.json instead.
"""

# --- Conductor Geometry ---
# Outer bounding rectangle of the conductor frame, in circuit units.
OUTER_WIDTH = 650
OUTER_HEIGHT = 400
CONDUCTOR_WIDTH = 15
# The carrier track runs along the midline of the conductor.
RAIL_OFFSET = CONDUCTOR_WIDTH / 2
TRACK_WIDTH = OUTER_WIDTH - CONDUCTOR_WIDTH    # 635
TRACK_HEIGHT = OUTER_HEIGHT - CONDUCTOR_WIDTH  # 385
PERIMETER = 2 * (TRACK_WIDTH + TRACK_HEIGHT)   # 2040

# Maximum perpendicular jitter of a carrier inside the conductor.
# Slightly less than the conductor width so carriers stay visibly inside.
TRANSVERSE_SPREAD = 12.0

# --- Battery Geometry ---
# The battery is centered horizontally on the top rail.
BATTERY_CENTER_X = 325.0
BATTERY_WIDTH = 150.0
BATTERY_HEIGHT = 75.0
BATTERY_LEFT = BATTERY_CENTER_X - BATTERY_WIDTH / 2    # 250
BATTERY_RIGHT = BATTERY_CENTER_X + BATTERY_WIDTH / 2   # 400
BATTERY_TOP = RAIL_OFFSET - BATTERY_HEIGHT / 2         # -30
# Each chemical band (manganese, electrolyte, zinc) is a third of the body.
BATTERY_BAND_WIDTH = BATTERY_WIDTH / 3
FULL_CHARGE = 100.0

# --- Switch Geometry ---
SWITCH_GAP_OFFSET = 50.0
SWITCH_LEFT = BATTERY_RIGHT + SWITCH_GAP_OFFSET        # 450
SWITCH_WIDTH = 30.0
SWITCH_HEIGHT = 20.0

# Distance from the rail within which a point counts as "on the rail".
RAIL_TOLERANCE = 1.0

# --- Ion Grid ---
ION_ROWS = 15
ION_COLUMNS = 5

# --- Visualization settings ---
WINDOW_WIDTH = 850
WINDOW_HEIGHT = 640
# Top-left of the circuit frame inside the window.
CIRCUIT_ORIGIN = (100, 120)
BACKGROUND_COLOR = (0, 0, 0)
CONDUCTOR_COLOR = (255, 255, 255)
CARRIER_COLOR = (220, 0, 0)
CARRIER_RADIUS = 1
TRANSIENT_RADIUS = 2
FIELD_MARKER_COLOR = (160, 32, 240)
FIELD_MARKER_HALF_LENGTH = 25
ION_COLOR = (0, 0, 255)
MANGANESE_COLOR = (211, 211, 211)
ELECTROLYTE_COLOR = (173, 216, 230)
ZINC_COLOR = (255, 192, 203)
BULB_ON_COLOR = (255, 255, 0)
BULB_OFF_COLOR = (51, 51, 51)
BULB_RADIUS = 40
BULB_CENTER_X = 318 + RAIL_OFFSET

TEXT_COLOR = (255, 255, 255)
BUTTON_COLOR = (17, 24, 39)
BUTTON_HOVER_COLOR = (31, 41, 55)
BUTTON_BORDER_COLOR = (75, 85, 99)

TOGGLE_LABEL = "Clic per obrir/tancar el circuit"
DEAD_LABEL = "Bateria esgotada. Torna a carregar-la."
LEGEND_ENTRIES = [
    ("Electrons lliures.", "dot"),
    ("Electrons química.", "small_dot"),
    ("Àtom positiu", "plus"),
    ("Manganès", "manganese"),
    ("Electròlit", "electrolyte"),
    ("Zinc", "zinc"),
    ("Camp Elèctric.", "field"),
]

WINDOW_TITLE = "Representació del circuit elèctric de corrent continu"
