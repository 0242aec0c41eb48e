"""Foreground/background contrast scoring (WCAG 2.0 relative luminance)."""

import re
from dataclasses import dataclass

MIN_SCANNABLE_RATIO = 3.0

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def parse_hex(color: str) -> tuple[int, int, int]:
    """Parse a hex colour string (with or without '#') to an RGB tuple."""
    m = _HEX_RE.match(color.strip())
    if m is None:
        raise ValueError(f"Expected a 6-digit hex colour, got {color!r}")
    s = m.group(1)
    return tuple(int(s[i : i + 2], 16) for i in (0, 2, 4))


def _linearize(channel: int) -> float:
    """Convert sRGB channel (0-255) to linear light value."""
    c = channel / 255.0
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def luminance(rgb: tuple[int, int, int]) -> float:
    """Relative luminance per WCAG 2.0."""
    r, g, b = [_linearize(ch) for ch in rgb]
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def score(fg: str, bg: str) -> float:
    """Contrast ratio between two hex colours (1.0 to 21.0)."""
    l1 = luminance(parse_hex(fg))
    l2 = luminance(parse_hex(bg))
    if l1 < l2:
        l1, l2 = l2, l1
    return (l1 + 0.05) / (l2 + 0.05)


def is_poor(ratio: float, threshold: float = MIN_SCANNABLE_RATIO) -> bool:
    return ratio < threshold


@dataclass(frozen=True)
class ContrastReport:
    """Advisory result for a colour pair. Never blocks generation."""

    ratio: float
    threshold: float = MIN_SCANNABLE_RATIO

    @property
    def ok(self) -> bool:
        return not is_poor(self.ratio, self.threshold)

    @property
    def message(self) -> str | None:
        if self.ok:
            return None
        return (
            "Low contrast: this colour combination may not scan well. "
            f"Contrast ratio: {self.ratio:.1f}:1 (recommended: {self.threshold:g}:1 minimum)"
        )


def check(fg: str, bg: str, threshold: float = MIN_SCANNABLE_RATIO) -> ContrastReport:
    return ContrastReport(ratio=score(fg, bg), threshold=threshold)
