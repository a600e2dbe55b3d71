"""Displays that turn capability and reachability messages into coloured visuals."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .geometry import Quaternion
from .visuals import CapabilityMessage, CapMapVisual, Disect, ReachMapVisual, ShapeKind
from .workspace import WorkSpace

log = logging.getLogger(__name__)

Vector = tuple[float, float, float]
RGB = tuple[int, int, int]
Frame = tuple[Vector, Quaternion]


def _unit_color(color: RGB) -> tuple[float, float, float]:
    """Scale an 8-bit colour to the 0..1 range used by the visuals."""
    r, g, b = color
    return (r / 255.0, g / 255.0, b / 255.0)


@dataclass
class CapMapDisplay:
    """Keeps one visual per capability message and applies display settings.

    Colours are 8-bit (r, g, b); the visuals receive them scaled to 0..1.
    """

    color_by_reachability: bool = True
    disect: Disect = Disect.FULL
    color: RGB = (255, 225, 102)
    alpha: float = 1.0
    size: float = 0.1
    lowest_ri: int = 0
    highest_ri: int = 100
    visuals: list[CapMapVisual] = field(default_factory=list)

    def reset(self) -> None:
        """Drop every visual shown so far."""
        self.visuals.clear()

    def update_color_and_alpha(self) -> None:
        r, g, b = _unit_color(self.color)
        for visual in self.visuals:
            visual.set_color(r, g, b, self.alpha)

    def update_size(self) -> None:
        for visual in self.visuals:
            visual.set_size(self.size)

    def process_message(self, message: CapabilityMessage, frame: Frame | None) -> CapMapVisual | None:
        """Build a visual for ``message`` placed at ``frame``.

        ``frame`` is the (position, orientation) of the message frame, or
        ``None`` when it could not be resolved; then nothing is added.
        """
        if frame is None:
            log.debug("Error transforming capability map frame")
            return None
        position, orientation = frame
        visual = CapMapVisual()
        visual.set_message(message, self.lowest_ri, self.highest_ri, self.disect)
        visual.set_frame_position(position)
        visual.set_frame_orientation(orientation)
        if self.color_by_reachability:
            visual.set_color_by_ri(self.alpha)
        else:
            r, g, b = _unit_color(self.color)
            visual.set_color(r, g, b, self.alpha)
        self.visuals.append(visual)
        self.update_size()
        return visual


@dataclass
class ReachMapDisplay:
    """Keeps one visual per reachability workspace and applies display settings.

    Colours are 8-bit (r, g, b); the visuals receive them scaled to 0..1.
    """

    show_poses: bool = False
    show_shape: bool = True
    color_by_reachability: bool = True
    shape: ShapeKind = ShapeKind.SPHERE
    disect: Disect = Disect.FULL
    arrow_color: RGB = (204, 51, 204)
    arrow_alpha: float = 0.2
    arrow_length: float = 0.01
    shape_color: RGB = (255, 225, 102)
    shape_alpha: float = 1.0
    shape_size: float = 0.05
    lowest_ri: int = 0
    highest_ri: int = 100
    visuals: list[ReachMapVisual] = field(default_factory=list)

    def reset(self) -> None:
        """Drop every visual shown so far."""
        self.visuals.clear()

    def update_color_and_alpha_arrow(self) -> None:
        r, g, b = _unit_color(self.arrow_color)
        for visual in self.visuals:
            visual.set_color_arrow(r, g, b, self.arrow_alpha)

    def update_arrow_size(self) -> None:
        for visual in self.visuals:
            visual.set_size_arrow(self.arrow_length)

    def update_color_and_alpha_shape(self) -> None:
        r, g, b = _unit_color(self.shape_color)
        for visual in self.visuals:
            visual.set_color_shape(r, g, b, self.shape_alpha)

    def update_shape_size(self) -> None:
        for visual in self.visuals:
            visual.set_size_shape(self.shape_size)

    def process_message(self, workspace: WorkSpace, frame: Frame | None) -> ReachMapVisual | None:
        """Build a visual for ``workspace`` placed at ``frame``.

        ``frame`` is the (position, orientation) of the message frame, or
        ``None`` when it could not be resolved; then nothing is added.
        Arrows are coloured but keep their default size.
        """
        if frame is None:
            log.debug("Error transforming reachability map frame")
            return None
        position, orientation = frame
        visual = ReachMapVisual()
        visual.set_message(
            workspace,
            self.show_poses,
            self.show_shape,
            self.lowest_ri,
            self.highest_ri,
            self.shape,
            self.disect,
        )
        visual.set_frame_position(position)
        visual.set_frame_orientation(orientation)

        ar, ag, ab = _unit_color(self.arrow_color)
        visual.set_color_arrow(ar, ag, ab, self.arrow_alpha)

        if self.color_by_reachability:
            visual.set_color_shape_by_ri(self.shape_alpha)
        else:
            sr, sg, sb = _unit_color(self.shape_color)
            visual.set_color_shape(sr, sg, sb, self.shape_alpha)

        self.visuals.append(visual)
        self.update_shape_size()
        return visual