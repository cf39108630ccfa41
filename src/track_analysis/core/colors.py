"""
Display color assignment for new tracks.

The tracker takes any zero-argument callable returning a color tag.
Seeded strategies make colors reproducible in tests and replays.
"""

import random
from collections.abc import Callable, Sequence

ColorAssigner = Callable[[], str]

DEFAULT_PALETTE = (
    "#E6194B",
    "#3CB44B",
    "#FFE119",
    "#4363D8",
    "#F58231",
    "#911EB4",
    "#46F0F0",
    "#F032E6",
)


class RandomHueColors:
    """HSL colors with a random hue, as "hsl(h, 100%, 50%)"."""

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def __call__(self) -> str:
        return f"hsl({self._rng.uniform(0, 360):.1f}, 100%, 50%)"


class PaletteColors:
    """Cycles through a fixed palette in order."""

    def __init__(self, palette: Sequence[str] = DEFAULT_PALETTE):
        if not palette:
            raise ValueError("Palette must contain at least one color")
        self._palette = tuple(palette)
        self._index = 0

    def __call__(self) -> str:
        color = self._palette[self._index % len(self._palette)]
        self._index += 1
        return color
