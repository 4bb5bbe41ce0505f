"""Named reference colors and palette construction."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

RGB = tuple[int, int, int]

COLOR_TABLE: Mapping[str, RGB] = MappingProxyType(
    {
        "white": (255, 255, 255),
        "black": (0, 0, 0),
        "red": (255, 0, 0),
        "green": (0, 255, 0),
        "blue": (0, 0, 255),
        "cyan": (0, 255, 255),
        "magenta": (255, 0, 255),
        "yellow": (255, 255, 0),
    }
)

DEFAULT_COLORS = ("white", "black", "red", "green", "blue")


class PaletteError(ValueError):
    """No usable colors were given."""


@dataclass(frozen=True)
class Palette:
    """Ordered, non-empty list of RGB reference colors.

    Order matters: the quantizer resolves distance ties to the earliest entry.
    """

    colors: tuple[RGB, ...]
    names: tuple[str, ...] = ()
    dropped: tuple[str, ...] = ()  # Names that were not in the color table

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", tuple(tuple(c) for c in self.colors))
        if not self.colors:
            raise PaletteError("Palette needs at least one color")
        for color in self.colors:
            if len(color) != 3 or any(not 0 <= c <= 255 for c in color):
                raise PaletteError(f"Invalid RGB color: {color}")

    @classmethod
    def from_names(
        cls,
        names: Iterable[str],
        table: Mapping[str, RGB] = COLOR_TABLE,
    ) -> Palette:
        """Resolve color names through ``table``.

        Lookup is case-insensitive. Unknown names are skipped and listed in
        ``dropped``; if none resolve, PaletteError is raised.
        """
        colors: list[RGB] = []
        found: list[str] = []
        dropped: list[str] = []
        for name in names:
            key = name.strip().lower()
            if key in table:
                colors.append(tuple(table[key]))
                found.append(key)
            else:
                dropped.append(name)

        if not colors:
            raise PaletteError(
                f"No known colors in {dropped!r}; choose from: {', '.join(table)}"
            )
        return cls(tuple(colors), tuple(found), tuple(dropped))

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self):
        return iter(self.colors)
