"""
Viewport.

Pan offset and zoom of the canvas, and the screen/graph transform.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..config import CanvasConfig
from ..models import Position


@dataclass
class Viewport:
    """
    Canvas viewport.

    graph = (screen - origin - offset) / zoom
    screen = graph * zoom + offset + origin

    `origin` is the top-left of the canvas element on screen.
    """

    offset: Position = field(default_factory=Position)
    zoom: float = 1.0
    origin: Position = field(default_factory=Position)
    min_zoom: float = 0.5
    max_zoom: float = 2.0
    zoom_step: float = 0.1
    grid_size: int = 40

    @classmethod
    def from_config(cls, config: CanvasConfig) -> "Viewport":
        viewport = cls(
            min_zoom=config.min_zoom,
            max_zoom=config.max_zoom,
            zoom_step=config.zoom_step,
            grid_size=config.grid_size,
        )
        viewport.set_zoom(config.default_zoom)
        return viewport

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------

    def screen_to_graph(self, screen: Position) -> Position:
        return Position(
            (screen.x - self.origin.x - self.offset.x) / self.zoom,
            (screen.y - self.origin.y - self.offset.y) / self.zoom,
        )

    def graph_to_screen(self, point: Position) -> Position:
        return Position(
            point.x * self.zoom + self.offset.x + self.origin.x,
            point.y * self.zoom + self.offset.y + self.origin.y,
        )

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def clamp_zoom(self, zoom: float) -> float:
        # Rounded so repeated steps do not drift past the bounds
        return round(min(self.max_zoom, max(self.min_zoom, zoom)), 6)

    def set_zoom(self, zoom: float, anchor: Optional[Position] = None) -> float:
        """
        Set the zoom level, clamped to the configured bounds.

        Args:
            zoom: Requested zoom
            anchor: Screen point whose graph position stays fixed;
                without one the offset is left unchanged

        Returns:
            The applied zoom
        """
        new_zoom = self.clamp_zoom(zoom)

        if anchor is not None and new_zoom != self.zoom:
            fixed = self.screen_to_graph(anchor)
            self.zoom = new_zoom
            self.offset = Position(
                anchor.x - self.origin.x - fixed.x * new_zoom,
                anchor.y - self.origin.y - fixed.y * new_zoom,
            )
        else:
            self.zoom = new_zoom

        return self.zoom

    def zoom_in(self, anchor: Optional[Position] = None) -> float:
        return self.set_zoom(self.zoom + self.zoom_step, anchor)

    def zoom_out(self, anchor: Optional[Position] = None) -> float:
        return self.set_zoom(self.zoom - self.zoom_step, anchor)

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def pan_by(self, dx: float, dy: float) -> Position:
        """Move the offset by a screen-space delta."""
        self.offset = self.offset.offset(dx, dy)
        return self.offset

    def reset(self) -> None:
        self.offset = Position()
        self.zoom = self.clamp_zoom(1.0)

    # ------------------------------------------------------------------
    # Grid (cosmetic)
    # ------------------------------------------------------------------

    @property
    def grid_spacing(self) -> float:
        return self.grid_size * self.zoom

    @property
    def grid_phase(self) -> Tuple[float, float]:
        spacing = self.grid_spacing
        return (self.offset.x % spacing, self.offset.y % spacing)
