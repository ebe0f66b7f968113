"""Crop rectangle bookkeeping shared between the editor and the crop widget.

The interactive widget enforces the aspect ratio while the user drags; this
module is only the source of record.  Its one piece of policy is the scale
guard in :meth:`CropCoordinator.on_image_preview_loaded`: coordinates taken
at one display scale are not pushed back into the widget once the preview
has been reloaded at another scale.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence

from ..config import MIN_CROP_SIZE, STARTER_CROP_SIZE
from .rotation import Size

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from ..application.interfaces import ICropWidget

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CropRegion:
    """Rectangle ``(x, y) - (x2, y2)`` as reported by the crop widget."""

    x: float
    y: float
    x2: float
    y2: float
    force_apply: bool = False

    @property
    def w(self) -> float:
        return self.x2 - self.x

    @property
    def h(self) -> float:
        return self.y2 - self.y

    def as_select(self) -> list[float]:
        return [self.x, self.y, self.x2, self.y2]

    def is_intentional(self, min_size: float = MIN_CROP_SIZE) -> bool:
        """Return ``False`` for selections too small to be anything but a slip."""

        return self.w > min_size and self.h > min_size

    def to_crop_params(self) -> dict[str, int]:
        """Return the ``crop`` operation parameters for the image service."""

        return {
            "x": int(round(self.x)),
            "y": int(round(self.y)),
            "width": int(round(self.w)),
            "height": int(round(self.h)),
        }

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "x2": self.x2, "y2": self.y2, "w": self.w, "h": self.h}

    @classmethod
    def from_value(cls, value: "CropRegion | Mapping[str, Any] | Sequence[float]") -> "CropRegion":
        """Accept a region, a ``[x, y, x2, y2]`` sequence or a coordinate mapping.

        Mappings may carry either ``x2``/``y2`` or ``w``/``h``.
        """

        if isinstance(value, CropRegion):
            return value
        if isinstance(value, Mapping):
            x = float(value.get("x", 0))
            y = float(value.get("y", 0))
            if "x2" in value and "y2" in value:
                x2, y2 = float(value["x2"]), float(value["y2"])
            else:
                x2 = x + float(value.get("w", value.get("width", 0)))
                y2 = y + float(value.get("h", value.get("height", 0)))
            return cls(x, y, x2, y2, force_apply=bool(value.get("forceApply", False)))
        x, y, x2, y2 = (float(component) for component in value)
        return cls(x, y, x2, y2)


class CropState(Enum):
    NO_CROP = "no_crop"
    PENDING_SELECTION = "pending_selection"
    LOCKED_RATIO = "locked_ratio"


class CropCoordinator:
    """Own the crop region, the aspect lock and the display-scale guard."""

    def __init__(
        self,
        *,
        min_size: float = MIN_CROP_SIZE,
        starter_size: float = STARTER_CROP_SIZE,
    ) -> None:
        self._min_size = min_size
        self._starter_size = starter_size
        self._widget: Optional["ICropWidget"] = None
        self._region: Optional[CropRegion] = None
        self._aspect_lock: Optional[float] = None
        self._displayed_size: Size = (0, 0)
        self._true_size: Optional[Size] = None

    # ------------------------------------------------------------------
    # Accessors
    @property
    def region(self) -> Optional[CropRegion]:
        return self._region

    @property
    def aspect_lock(self) -> Optional[float]:
        return self._aspect_lock

    @property
    def displayed_size(self) -> Size:
        return self._displayed_size

    @property
    def true_size(self) -> Optional[Size]:
        return self._true_size

    @property
    def widget(self) -> Optional["ICropWidget"]:
        return self._widget

    @property
    def state(self) -> CropState:
        if self._aspect_lock is not None:
            return CropState.LOCKED_RATIO
        if self._region is not None:
            return CropState.PENDING_SELECTION
        return CropState.NO_CROP

    # ------------------------------------------------------------------
    # Widget binding
    def attach_widget(self, widget: "ICropWidget") -> None:
        self._widget = widget
        if self._true_size is not None:
            widget.set_options(true_size=self._true_size)
        if self._aspect_lock is not None:
            widget.set_options(aspect_ratio=self._aspect_lock)

    def detach_widget(self) -> None:
        self._widget = None

    def set_true_size(self, size: Optional[Size]) -> None:
        self._true_size = size
        if size is not None and self._widget is not None:
            self._widget.set_options(true_size=size)

    # ------------------------------------------------------------------
    # User and widget events
    def lock_ratio(self, ratio: float) -> None:
        if self._region is None:
            # Without a widget the starter waits for the first preview load.
            self._region = CropRegion(
                0,
                0,
                self._starter_size,
                self._starter_size,
                force_apply=self._widget is None,
            )
            if self._widget is not None:
                self._widget.set_select(self._region.as_select())
        self._aspect_lock = ratio
        if self._widget is not None:
            self._widget.set_options(aspect_ratio=ratio)

    def unlock_ratio(self) -> None:
        self._aspect_lock = None
        if self._widget is not None:
            # A ratio of zero lets the widget resize freely again.
            self._widget.set_options(aspect_ratio=0)

    def on_external_selection_change(self, rect: "CropRegion | Mapping[str, Any] | Sequence[float]") -> None:
        region = CropRegion.from_value(rect)
        self._region = replace(region, force_apply=False)

    def import_region(
        self,
        rect: "CropRegion | Mapping[str, Any] | Sequence[float]",
        *,
        force_apply: bool = True,
    ) -> CropRegion:
        """Seed the region from previously committed parameters."""

        self._region = replace(CropRegion.from_value(rect), force_apply=force_apply)
        return self._region

    def on_image_preview_loaded(self, width: int, height: int) -> bool:
        """Push the pending region into the widget if it is still valid.

        Returns ``True`` when the region was applied.
        """

        applied = False
        region = self._region
        scale_unchanged = self._displayed_size[0] == width
        if region is not None and (scale_unchanged or region.force_apply):
            if self._widget is not None:
                self._widget.set_select(region.as_select())
                applied = True
                if region.force_apply:
                    self._region = replace(region, force_apply=False)
        elif region is not None:
            _LOGGER.debug(
                "Preview width changed from %s to %s; not reapplying crop %s",
                self._displayed_size[0],
                width,
                region.as_select(),
            )

        self._displayed_size = (width, height)
        return applied

    # ------------------------------------------------------------------
    # Lifecycle
    def clear_region(self) -> None:
        self._region = None

    def on_rotated(self, true_size: Optional[Size]) -> None:
        """Adopt the rotated true size and drop the selection.

        The selection was drawn on the unrotated preview, so it is discarded
        rather than transformed.  The aspect lock survives and is re-sent so
        the user's next selection keeps the chosen ratio.
        """

        self.set_true_size(true_size)
        self._region = None
        if self._aspect_lock is not None and self._widget is not None:
            self._widget.set_options(aspect_ratio=self._aspect_lock)

    def clear_pending(self) -> None:
        """Drop every force flag so late preview loads cannot apply anything."""

        if self._region is not None and self._region.force_apply:
            self._region = replace(self._region, force_apply=False)

    def clear(self) -> None:
        """Drop the region and the aspect lock, releasing the widget too."""

        self._region = None
        if self._aspect_lock is not None and self._widget is not None:
            self._widget.set_options(aspect_ratio=0)
        self._aspect_lock = None

    def committed_region(self) -> Optional[CropRegion]:
        """Project the region as it should be committed, or ``None``."""

        region = self._region
        if region is None or not region.is_intentional(self._min_size):
            return None
        return replace(region, force_apply=False)


__all__ = ["CropCoordinator", "CropRegion", "CropState"]
