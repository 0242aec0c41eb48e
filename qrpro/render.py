"""Render pipeline: draw the QR matrix onto a surface, then overlay an optional logo."""

import itertools

from PIL import Image, ImageDraw

from qrpro.codec import CodecLoader, default_loader
from qrpro.config import Settings
from qrpro.contrast import parse_hex
from qrpro.errors import AssetLoadError, RenderError
from qrpro.logging import audit, get_logger, trace
from qrpro.logo import fit_logo
from qrpro.models import AppearanceConfig, Payload
from qrpro.surface import Surface

log = get_logger("render")

# Highest level (~30% recovery) so the centre logo can occlude modules
ERROR_CORRECTION = "H"
LOGO_PAD_COLOR = (255, 255, 255)

_generations = itertools.count(1)


class RenderToken:
    """Staleness guard for one in-flight render."""

    def __init__(self):
        self.generation = next(_generations)
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        return f"RenderToken(generation={self.generation}, cancelled={self._cancelled})"


@trace
def composite_logo(
    qr_image: Image.Image,
    logo_image: Image.Image,
    fraction: float = 0.2,
    margin: int = 5,
    pad_color: tuple[int, ...] = LOGO_PAD_COLOR,
) -> Image.Image:
    """Overlay the logo centred on an opaque square pad.

    The logo fills a square ``fraction`` of the canvas edge; the pad extends
    ``margin`` px beyond it on every side. Returns a new image.

    Args:
        qr_image:   Rendered QR (RGB).
        logo_image: Decoded logo (any mode; alpha is honoured).
        fraction:   Logo edge as a fraction of the QR edge.
        margin:     Pad width in pixels around the logo.
        pad_color:  RGB fill of the pad.
    """
    qr_w, qr_h = qr_image.size
    edge = max(1, int(qr_w * fraction))
    x_off = (qr_w - edge) // 2
    y_off = (qr_h - edge) // 2

    result = qr_image.copy()
    draw = ImageDraw.Draw(result)
    draw.rectangle(
        [x_off - margin, y_off - margin, x_off + edge - 1 + margin, y_off + edge - 1 + margin],
        fill=pad_color,
    )

    logo_rgba = fit_logo(logo_image.convert("RGBA"), edge)
    result.paste(logo_rgba, (x_off, y_off), logo_rgba)

    audit(
        "logo.composited", logger=log,
        qr_size=f"{qr_w}x{qr_h}",
        logo_size=f"{edge}x{edge}",
        margin_px=margin,
    )
    return result


class RenderCompositor:
    """Draws payloads onto a surface. Holds no per-render state."""

    def __init__(self, loader: CodecLoader | None = None, settings: Settings | None = None):
        settings = settings or Settings()
        self._loader = loader or default_loader()
        self.logo_fraction = settings.logo_fraction
        self.logo_margin = settings.logo_margin

    def _discard(self, token: RenderToken, stage: str) -> bool:
        audit("render.discarded", logger=log, generation=token.generation, stage=stage)
        return False

    @trace
    async def render(
        self,
        payload: Payload,
        appearance: AppearanceConfig,
        surface: Surface | None,
        token: RenderToken | None = None,
    ) -> bool:
        """Render ``payload`` onto ``surface``.

        The base matrix is committed before the logo is awaited, and the
        token is checked right before each commit.

        Returns:
            True if the render reached the surface, False if it went stale.

        Raises:
            RenderError: if the surface is unavailable, the codec cannot be
                loaded, or the payload cannot be encoded.
        """
        if surface is None or not surface.available:
            raise RenderError("Drawing surface is not available")
        token = token or RenderToken()

        codec = await self._loader.acquire()
        try:
            base = codec.encode(
                payload,
                error_correction=ERROR_CORRECTION,
                size=appearance.size,
                foreground=parse_hex(appearance.fg_color),
                background=parse_hex(appearance.bg_color),
                style=appearance.style,
            )
        except Exception as e:
            raise RenderError(f"Could not encode QR code: {e}") from e

        if token.cancelled:
            return self._discard(token, "matrix")
        surface.commit(base)
        audit("render.committed", logger=log, generation=token.generation,
              size=appearance.size, style=appearance.style.value)

        if appearance.logo is None:
            return True

        try:
            logo = await appearance.logo.load()
        except AssetLoadError as e:
            log.warning("Logo skipped, keeping plain code: %s", e)
            audit("render.logo_skipped", logger=log, generation=token.generation, logo=appearance.logo.name)
            return True

        if token.cancelled:
            return self._discard(token, "logo")
        surface.commit(composite_logo(base, logo, self.logo_fraction, self.logo_margin))
        audit("render.logo_committed", logger=log, generation=token.generation, logo=appearance.logo.name)
        return True
