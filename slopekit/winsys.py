"""Screen resolutions offered by the game and the screen scale factor."""

from __future__ import annotations

import math
from dataclasses import dataclass

NUM_RESOLUTIONS = 10
SCREENSHOT_FORMAT = ".png"
REFERENCE_HEIGHT = 768
SMALL_SCREEN_SCALE = 0.78


@dataclass(frozen=True)
class ScreenRes:
    width: int = 0
    height: int = 0


def screen_scale(height: int, quad_scale: bool = False) -> float:
    """Scale factor for a screen of the given height, relative to 768 pixels.

    Screens lower than 768 pixels get a fixed 0.78; ``quad_scale`` takes the
    square root of the factor.
    """
    if height < REFERENCE_HEIGHT:
        scale = SMALL_SCREEN_SCALE
    else:
        scale = height / REFERENCE_HEIGHT
    return math.sqrt(scale) if quad_scale else scale


class ScreenModes:
    """The list of selectable resolutions; entry 0 is the desktop mode."""

    def __init__(self, desktop: ScreenRes = ScreenRes(800, 600)) -> None:
        self.auto_resolution = ScreenRes(800, 600)
        self.resolutions = (
            desktop,
            ScreenRes(800, 600),
            ScreenRes(1024, 768),
            ScreenRes(1152, 864),
            ScreenRes(1280, 960),
            ScreenRes(1280, 1024),
            ScreenRes(1360, 768),
            ScreenRes(1400, 1050),
            ScreenRes(1440, 900),
            ScreenRes(1680, 1050),
        )

    def resolution(self, idx: int, fullscreen: bool) -> ScreenRes:
        """Resolution ``idx``; the automatic one outside the list or for a
        windowed desktop mode."""
        if not 0 <= idx < NUM_RESOLUTIONS or (idx == 0 and not fullscreen):
            return self.auto_resolution
        return self.resolutions[idx]

    def res_name(self, idx: int, auto_label: str = "auto") -> str:
        """Display name such as ``"1024 x 768"``; entry 0 uses ``auto_label``."""
        if not 0 <= idx < NUM_RESOLUTIONS:
            return "800 x 600"
        if idx == 0:
            return auto_label
        res = self.resolutions[idx]
        return f"{res.width} x {res.height}"