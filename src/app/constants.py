"""
Application Constants.
Stores default values for timeline layout configuration and magic numbers.
"""

# Era Configuration
GREGORIAN_ANCHOR_ERA = "公元纪年"
DEFAULT_ERA_ORDER = [GREGORIAN_ANCHOR_ERA]
DEFAULT_CONNECTION_LABEL = "导致"

# Event Geometry
EVENT_WIDTH = 200
EVENT_CARD_HEIGHT = 120  # Expanded height
CAPSULE_HEIGHT = 40  # Collapsed height

# Column Geometry
EVENT_GAP = 80  # Horizontal gap between day columns
PADDING_X = 20
INDENTATION_STEP = 20
MAX_INDENTATION_LEVEL = 10

# Lane Geometry
SAME_DAY_VERTICAL_GAP = 25
SAME_DAY_CONNECTED_EVENT_GAP = 40  # Extra gap for connected same-day events
LANE_VERTICAL_PADDING = 20
MIN_LANE_HEIGHT = CAPSULE_HEIGHT + 2 * LANE_VERTICAL_PADDING
RULER_HEIGHT = 48

# Drop Indicator
DROP_INDICATOR_INSET = 20

# Highlight Palette
HIGHLIGHT_COLORS = [
    "#3b82f6",  # blue-500
    "#10b981",  # emerald-500
    "#f97316",  # orange-500
    "#8b5cf6",  # violet-500
    "#ef4444",  # red-500
    "#eab308",  # yellow-500
    "#ec4899",  # pink-500
]
DEFAULT_CONNECTION_COLOR = "#6b7280"
DIMMED_EVENT_OPACITY = 0.3

# Files
DEFAULT_SCRIPT_NAME = "script.json"
