"""Configuration constants for Yard Planner.

All configurable parameters are centralized here for easy tuning.

Classes:
    AppConfig: UI application settings
    CanvasConfig: Drawing surface dimensions (pixel space)
    DrawConfig: Gesture thresholds and default entity names
    CalibrationConfig: Scale calibration and measurement display
    ShareConfig: Share link format and schema version
    InteractionModes: Mode selector values
    StyleConfig: Visual colors and fonts of the canvas
"""


class AppConfig:
    """UI application settings."""

    TITLE = "Yard Planner"
    SUBTITLE = "Design your landscape with precision"
    ICON = "🌳"
    LAYOUT = "wide"


class CanvasConfig:
    """Drawing surface dimensions.

    Pixel space: origin top-left, x grows right, y grows down. Pointer events
    and rendered geometry share this space.
    """

    WIDTH = 900
    HEIGHT = 600

    # Plotly margin around the canvas (pixels)
    MARGIN = 10


class DrawConfig:
    """Gesture thresholds and default entity names."""

    # Trees with a canopy radius at or below this are misclicks (strict > to commit)
    MIN_TREE_RADIUS_PX = 5.0

    # Trunk marker radius drawn at every tree center
    TRUNK_RADIUS_PX = 4.0

    FENCE_NAME_TEMPLATE = "Fence {number}"
    TREE_NAME_TEMPLATE = "Tree {number}"


class CalibrationConfig:
    """Scale calibration and measurement display."""

    # Decimal places for displayed measurements
    FEET_DECIMALS = 1  # Calibrated values, e.g. "12.5 ft"
    PIXEL_DECIMALS = 0  # Uncalibrated fallback, e.g. "25 px"
    FEET_PER_PIXEL_DECIMALS = 2  # Scale banner, e.g. "0.50 feet per pixel"

    FEET_UNIT = "ft"
    PIXEL_UNIT = "px"


class ShareConfig:
    """Share link format.

    Payload keys match the links produced by the first version of the app
    (camelCase, "fenceLines") so those links keep loading.
    """

    QUERY_PARAM = "data"

    # Bumped when the payload layout changes incompatibly
    SCHEMA_VERSION = 1

    # Used when the app cannot determine its own URL
    DEFAULT_BASE_URL = "http://localhost:8501/"

    KEY_VERSION = "version"
    KEY_ADDRESS = "address"
    KEY_MAP_LOADED = "mapLoaded"
    KEY_SCALE = "scale"
    KEY_FENCES = "fenceLines"
    KEY_TREES = "trees"
    KEY_NOTES = "notes"
    KEY_NEXT_ID = "nextId"


class InteractionModes:
    """Mode selector values. Determines what a pointer-down on the canvas creates."""

    VIEW = "view"
    FENCE = "fence"
    TREE = "tree"

    ALL = [VIEW, FENCE, TREE]

    DISPLAY_NAMES = {
        VIEW: "View Mode",
        FENCE: "Draw Fence",
        TREE: "Place Tree",
    }
    assert set(DISPLAY_NAMES.keys()) == set(ALL)

    ICONS = {
        VIEW: "👁️",
        FENCE: "📏",
        TREE: "🌳",
    }
    assert set(ICONS.keys()) == set(ALL)


class EntityKinds:
    """Entity kind names used for move selection and gesture routing."""

    FENCE = "fence"
    TREE = "tree"

    ALL = [FENCE, TREE]


class StyleConfig:
    """Visual colors and fonts."""

    BACKGROUND_COLOR = "#e8f5e9"
    BACKGROUND_TEXT_COLOR = "#a5d6a7"
    BACKGROUND_TITLE = "Aerial View Area"
    BACKGROUND_SUBTITLE = "(In production, this would show aerial imagery)"
    EMPTY_CANVAS_COLOR = "#ffffff"

    FENCE_COLOR = "#8b4513"  # Saddle brown
    DRAFT_FENCE_COLOR = "#d2691e"  # Chocolate
    FENCE_WIDTH = 3

    TRUNK_COLOR = "#6d4c41"
    CANOPY_LINE_COLOR = "#2e7d32"
    CANOPY_FILL_COLOR = "rgba(76, 175, 80, 0.2)"
    CANOPY_LINE_WIDTH = 2
    RADIUS_LINE_WIDTH = 1

    MOVING_HIGHLIGHT_COLOR = "#2563eb"  # blue-600

    LABEL_FONT_FAMILY = "Arial"
    FENCE_LABEL_SIZE = 12
    TREE_LABEL_SIZE = 11

    # Label offsets (pixels, canvas space)
    FENCE_LABEL_OFFSET_Y = -5
    DIAMETER_LABEL_OFFSET_Y = -5
    TREE_NAME_OFFSET_Y = 15
