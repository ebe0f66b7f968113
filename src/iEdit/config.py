"""Default configuration values for iEdit."""

from __future__ import annotations

from typing import Final

# Preview images are requested from the image service bounded to this box so
# the editor pane never has to scale them down itself.
MAX_PREVIEW_WIDTH: Final[int] = 924
MAX_PREVIEW_HEIGHT: Final[int] = 693

# Committed references are capped by width only; the height follows the
# aspect ratio of whatever the pipeline produces.
OUTPUT_MAX_WIDTH: Final[int] = 552

OUTPUT_FORMAT: Final[str] = "jpg"

# Selections at or below this size on either axis are treated as accidental
# clicks on the crop widget and never reach the committed pipeline.
MIN_CROP_SIZE: Final[int] = 25

# Size of the selection synthesised when a ratio is locked before the user
# has drawn anything.
STARTER_CROP_SIZE: Final[int] = 300

SLIDER_DEBOUNCE_MS: Final[int] = 300
RESIZE_DEBOUNCE_MS: Final[int] = 150

# Metadata editor preview bounds and the chrome subtracted from the window
# height when sizing the image box.
META_PREVIEW_WIDTH: Final[int] = 1464
META_PREVIEW_HEIGHT: Final[int] = 1104
META_PANE_CHROME_HEIGHT: Final[int] = 50

# Ratio presets offered next to the crop widget, in display order.
CROP_FORMATS: Final[dict[str, float]] = {
    "4:3": 4 / 3,
    "3:2": 3 / 2,
    "16:9": 16 / 9,
    "1.85:1": 1.85,
    "2.39:1": 2.39,
    "3:4": 3 / 4,
    "2:3": 2 / 3,
}

# Metadata fields the editor falls back to when the primary key is empty.
METADATA_FALLBACKS: Final[dict[str, str]] = {
    "drp:title": "drp:filename",
    "drp:photographer": "exif:Artist",
}

# Input fields shown by the metadata editor.
METADATA_FIELDS: Final[tuple[str, ...]] = (
    "drp:title",
    "drp:description",
    "drp:photographer",
    "drp:agency",
    "drp:copyright",
)
