"""QR matrix codec: a lazily loaded ``qrcode`` backend plus the module renderer.

The codec is acquired once per process through a ``CodecLoader`` whose state
moves NOT_LOADED -> LOADING -> READY (or FAILED, which is retried on the next
acquire). Encoding always returns an RGB image of exactly ``size`` pixels.
"""

import asyncio
from enum import Enum
from typing import Callable

from PIL import Image, ImageDraw

from qrpro.errors import RenderError
from qrpro.logging import audit, get_logger, trace
from qrpro.models import Style

log = get_logger("codec")

ECC_LEVELS = ("L", "M", "Q", "H")
FINDER = 7  # finder pattern edge, modules


class LoadState(Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Module shapes
# ---------------------------------------------------------------------------

def _draw_module(
    draw: ImageDraw.ImageDraw,
    px: int,
    py: int,
    box: int,
    color: tuple[int, ...],
    style: Style,
) -> None:
    """Draw a single dark module with the given style."""
    if style is Style.DOTS:
        margin = max(1, box // 10)
        draw.ellipse([px + margin, py + margin, px + box - 1 - margin, py + box - 1 - margin], fill=color)
    elif style is Style.ROUNDED:
        draw.rounded_rectangle([px, py, px + box - 1, py + box - 1], radius=max(1, box // 3), fill=color)
    else:
        draw.rectangle([px, py, px + box - 1, py + box - 1], fill=color)


def _draw_styled_finders(
    draw: ImageDraw.ImageDraw,
    n: int,
    box: int,
    border: int,
    fg: tuple[int, ...],
    bg: tuple[int, ...],
    style: Style,
) -> None:
    """Draw the three 7x7 finder patterns as cohesive rounded blocks."""
    fpx = FINDER * box
    radius = box if style is Style.ROUNDED else box * 2
    for orig_r, orig_c in [(0, 0), (0, n - FINDER), (n - FINDER, 0)]:
        ox = (orig_c + border) * box
        oy = (orig_r + border) * box

        # Outer dark ring
        draw.rounded_rectangle([ox, oy, ox + fpx - 1, oy + fpx - 1], radius=radius, fill=fg)
        # Inner light ring
        m1 = box
        draw.rounded_rectangle(
            [ox + m1, oy + m1, ox + fpx - 1 - m1, oy + fpx - 1 - m1],
            radius=max(1, radius // 2), fill=bg,
        )
        # Centre dark block
        m2 = 2 * box
        if style is Style.DOTS:
            cx = ox + fpx // 2
            cy = oy + fpx // 2
            cr = int(box * 1.4)
            draw.ellipse([cx - cr, cy - cr, cx + cr, cy + cr], fill=fg)
        else:
            draw.rounded_rectangle(
                [ox + m2, oy + m2, ox + fpx - 1 - m2, oy + fpx - 1 - m2],
                radius=max(1, radius // 3), fill=fg,
            )


def _in_finder(r: int, c: int, n: int) -> bool:
    top = r < FINDER
    left = c < FINDER
    return (top and left) or (top and c >= n - FINDER) or (left and r >= n - FINDER)


def render_matrix(
    modules: list[list[bool]],
    size: int,
    fg: tuple[int, ...],
    bg: tuple[int, ...],
    style: Style = Style.SQUARE,
    border: int = 4,
) -> Image.Image:
    """Rasterize a module matrix to a ``size`` x ``size`` RGB image."""
    n = len(modules)
    total = n + border * 2
    box = max(4, -(-size // total))  # ceil, at least 4px so shapes stay legible
    canvas = total * box
    img = Image.new("RGB", (canvas, canvas), bg)
    draw = ImageDraw.Draw(img)

    styled_finders = style is not Style.SQUARE
    if styled_finders:
        _draw_styled_finders(draw, n, box, border, fg, bg, style)

    for r in range(n):
        for c in range(n):
            if not modules[r][c] or (styled_finders and _in_finder(r, c, n)):
                continue
            _draw_module(draw, (c + border) * box, (r + border) * box, box, fg, style)

    if canvas == size:
        return img
    resample = Image.NEAREST if style is Style.SQUARE else Image.LANCZOS
    return img.resize((size, size), resample)


# ---------------------------------------------------------------------------
# qrcode-backed codec
# ---------------------------------------------------------------------------

class QRCodeCodec:
    """Encodes text with the ``qrcode`` library and draws it with ``render_matrix``."""

    def __init__(self, qrcode_module, quiet_zone: int = 4):
        self._qrcode = qrcode_module
        self.quiet_zone = quiet_zone
        constants = qrcode_module.constants
        self._ecc = {
            "L": constants.ERROR_CORRECT_L,  # 7%
            "M": constants.ERROR_CORRECT_M,  # 15%
            "Q": constants.ERROR_CORRECT_Q,  # 25%
            "H": constants.ERROR_CORRECT_H,  # 30%
        }

    def matrix(self, text: str, error_correction: str = "H") -> list[list[bool]]:
        """Raw module matrix (True = dark) at the smallest fitting version."""
        level = error_correction.upper()
        if level not in self._ecc:
            raise ValueError(f"Unknown error correction level {error_correction!r}")
        qr = self._qrcode.QRCode(
            version=None,
            error_correction=self._ecc[level],
            box_size=1,
            border=0,
        )
        qr.add_data(text)
        qr.make(fit=True)
        return [list(row) for row in qr.modules]

    @trace
    def encode(
        self,
        text: str,
        error_correction: str = "H",
        size: int = 300,
        foreground: tuple[int, ...] = (0, 0, 0),
        background: tuple[int, ...] = (255, 255, 255),
        style: Style = Style.SQUARE,
    ) -> Image.Image:
        modules = self.matrix(text, error_correction)
        img = render_matrix(modules, size, foreground, background, style, border=self.quiet_zone)
        n = len(modules)
        audit("qr.encoded", logger=log,
              data=text[:80], version=(n - 17) // 4, grid=f"{n}x{n}",
              ecc=error_correction.upper(), style=style.value, image_px=f"{size}x{size}")
        return img


def load_qrcode_codec(quiet_zone: int = 4) -> QRCodeCodec:
    """Import the ``qrcode`` backend. Runs in a worker thread on first acquire."""
    import qrcode
    import qrcode.constants

    return QRCodeCodec(qrcode, quiet_zone=quiet_zone)


class CodecLoader:
    """One-time asynchronous acquisition of a codec, shared by concurrent callers."""

    def __init__(self, factory: Callable[[], object] = load_qrcode_codec):
        self._factory = factory
        self._codec = None
        self._pending: asyncio.Future | None = None
        self.state = LoadState.NOT_LOADED
        self.error: BaseException | None = None

    async def _load(self):
        try:
            codec = await asyncio.to_thread(self._factory)
        except asyncio.CancelledError:
            # Loop shut down or caller gave up: back to a clean slate
            if self._pending is asyncio.current_task():
                self.state = LoadState.NOT_LOADED
                self._pending = None
            audit("codec.cancelled", logger=log)
            raise
        except Exception as e:
            self.state = LoadState.FAILED
            self.error = e
            self._pending = None
            audit("codec.failed", logger=log, error=str(e))
            raise RenderError(f"QR renderer failed to load: {e}") from e
        self._codec = codec
        self.state = LoadState.READY
        self.error = None
        audit("codec.ready", logger=log, codec=type(codec).__name__)
        return codec

    async def acquire(self):
        """Return the loaded codec, loading it on first use.

        Raises:
            RenderError: if loading fails. A later call retries.
        """
        if self.state is LoadState.READY:
            return self._codec
        pending = self._pending
        if pending is not None and (pending.done() or pending.get_loop() is not asyncio.get_running_loop()):
            # Leftover from a cancelled load or from an event loop that is gone
            self._pending = None
        if self._pending is None:
            self.state = LoadState.LOADING
            self._pending = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._pending)


_default_loader = CodecLoader()


def default_loader() -> CodecLoader:
    """Process-wide loader; the codec is cached after the first success."""
    return _default_loader
