"""
Mapping between timeline seconds and view pixels.

ViewState is an immutable snapshot of zoom, scroll and canvas geometry.
All methods are pure: navigation returns a new snapshot.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field, replace
from typing import Optional

from .config import ENGINE_CONFIG, VIEW_CONFIG, ViewConfig


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True, slots=True)
class ViewState:
    """
    Horizontal and vertical view geometry of the timeline.

    canvas_width and canvas_height are in pixels, timeline_duration in
    seconds. scroll_x/scroll_y are pixel offsets into the zoomed content.
    """
    canvas_width: int
    timeline_duration: float
    zoom: float = 1.0
    scroll_x: float = 0.0
    canvas_height: int = 400
    scroll_y: float = 0.0
    config: ViewConfig = field(default=VIEW_CONFIG, repr=False)

    def __post_init__(self) -> None:
        if self.canvas_width <= 0:
            raise ValueError(f"canvas_width must be positive, got {self.canvas_width}")
        if self.timeline_duration <= 0:
            raise ValueError(f"timeline_duration must be positive, got {self.timeline_duration}")
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive, got {self.zoom}")

    # --- Time <-> pixel ---

    def time_to_pixel(self, time: float) -> float:
        return (time / self.timeline_duration) * self.canvas_width * self.zoom

    def pixel_to_time(self, pixel: float) -> float:
        return (pixel / (self.canvas_width * self.zoom)) * self.timeline_duration

    def time_per_pixel(self) -> float:
        return self.timeline_duration / (self.canvas_width * self.zoom)

    def max_scroll_x(self) -> float:
        return max(0.0, self.time_to_pixel(self.timeline_duration) - self.canvas_width)

    def visible_time_range(self) -> tuple[float, float]:
        return (self.pixel_to_time(self.scroll_x),
                self.pixel_to_time(self.scroll_x + self.canvas_width))

    # --- Zoom ---

    def zoomed_at(self, zoom: float, ref_pixel: Optional[float] = None) -> ViewState:
        """
        Change zoom while keeping the time under ref_pixel (canvas-relative)
        at the same on-screen position. Zoom and scroll are clamped.
        """
        zoom = _clamp(zoom, self.config.min_zoom, self.config.max_zoom)
        if zoom == self.zoom:
            return self
        if ref_pixel is None:
            ref_pixel = 0.0
        anchor_time = self.pixel_to_time(self.scroll_x + ref_pixel)
        zoomed = replace(self, zoom=zoom)
        scroll = zoomed.time_to_pixel(anchor_time) - ref_pixel
        return replace(zoomed, scroll_x=_clamp(scroll, 0.0, zoomed.max_scroll_x()))

    def wheel_zoom(self, direction: int, ref_pixel: float) -> ViewState:
        """One wheel notch; positive direction zooms in around the pointer."""
        step = self.config.wheel_zoom_step if direction > 0 else -self.config.wheel_zoom_step
        return self.zoomed_at(self.zoom + step, ref_pixel)

    def zoom_in(self) -> ViewState:
        return self._rezoom(self.zoom + self.config.button_zoom_step)

    def zoom_out(self) -> ViewState:
        return self._rezoom(self.zoom - self.config.button_zoom_step)

    def reset_zoom(self) -> ViewState:
        return replace(self, zoom=1.0, scroll_x=0.0)

    def _rezoom(self, zoom: float) -> ViewState:
        zoomed = replace(self, zoom=_clamp(zoom, self.config.min_zoom, self.config.max_zoom))
        return replace(zoomed, scroll_x=_clamp(zoomed.scroll_x, 0.0, zoomed.max_scroll_x()))

    # --- Scrolling ---

    def scrolled_by(self, dx: float = 0.0, dy: float = 0.0, max_tracks: int = ENGINE_CONFIG.max_tracks) -> ViewState:
        return replace(
            self,
            scroll_x=_clamp(self.scroll_x + dx, 0.0, self.max_scroll_x()),
            scroll_y=_clamp(self.scroll_y + dy, 0.0, self.max_scroll_y(max_tracks)),
        )

    def scroll_home(self, vertical: bool = False) -> ViewState:
        return replace(self, scroll_x=0.0, scroll_y=0.0 if vertical else self.scroll_y)

    def scroll_end(self, vertical: bool = False, max_tracks: int = ENGINE_CONFIG.max_tracks) -> ViewState:
        scroll_y = self.max_scroll_y(max_tracks) if vertical else self.scroll_y
        return replace(self, scroll_x=self.max_scroll_x(), scroll_y=scroll_y)

    def with_duration(self, timeline_duration: float) -> ViewState:
        """Snapshot for a new timeline length, scroll re-clamped."""
        resized = replace(self, timeline_duration=timeline_duration)
        return replace(resized, scroll_x=_clamp(resized.scroll_x, 0.0, resized.max_scroll_x()))

    # --- Ruler ---

    def tick_interval(self) -> float:
        """Smallest configured interval whose ticks are at least the minimum spacing apart."""
        min_interval = self.time_per_pixel() * self.config.tick_min_spacing_pixels
        for interval in self.config.tick_intervals:
            if interval >= min_interval:
                return interval
        return self.config.tick_intervals[-1]

    def tick_times(self) -> list[float]:
        """Tick positions (seconds) covering the visible range, one interval past each edge."""
        interval = self.tick_interval()
        start, end = self.visible_time_range()
        first = math.floor(start / interval)
        last = math.ceil(end / interval) + 1
        return [round(i * interval, 6) for i in range(first, last + 1)]

    # --- Lanes ---

    def lane_top(self, track_index: int) -> float:
        """Canvas y of a lane's top edge, scroll applied."""
        cfg = self.config
        return cfg.ruler_height + track_index * (cfg.track_height + cfg.track_spacing) + cfg.track_spacing - self.scroll_y

    def lane_at(self, y: float, max_tracks: int = ENGINE_CONFIG.max_tracks) -> Optional[int]:
        """Lane index under canvas y, or None for the ruler and lane gaps."""
        cfg = self.config
        content_y = y + self.scroll_y - cfg.ruler_height - cfg.track_spacing
        if content_y < 0:
            return None
        pitch = cfg.track_height + cfg.track_spacing
        index = int(content_y // pitch)
        if index >= max_tracks or content_y - index * pitch > cfg.track_height:
            return None
        return index

    def max_scroll_y(self, max_tracks: int = ENGINE_CONFIG.max_tracks) -> float:
        cfg = self.config
        total = max_tracks * (cfg.track_height + cfg.track_spacing) + cfg.track_spacing
        return max(0.0, total - (self.canvas_height - cfg.ruler_height))
