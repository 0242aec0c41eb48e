"""Logo assets: in-memory image references and their asynchronous decoding."""

import asyncio
import io
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from qrpro.errors import AssetLoadError
from qrpro.logging import audit, get_logger, trace

log = get_logger("logo")


@dataclass(frozen=True)
class LogoAsset:
    """A user-selected logo image held as raw encoded bytes.

    Decoding is deferred until render time so a corrupt upload only degrades
    the logo overlay instead of failing ingestion.
    """

    data: bytes
    name: str = "logo"

    def __repr__(self) -> str:
        return f"LogoAsset(name={self.name!r}, bytes={len(self.data)})"

    @classmethod
    def from_path(cls, path: str | Path) -> "LogoAsset":
        """Read a logo file into memory."""
        p = Path(path)
        try:
            data = p.read_bytes()
        except OSError as e:
            raise AssetLoadError(f"Could not read logo '{p}': {e}") from e
        audit("logo.ingested", logger=log, name=p.name, bytes=len(data))
        return cls(data=data, name=p.name)

    def decode(self) -> Image.Image:
        """Decode the bytes into an RGBA image.

        Raises:
            AssetLoadError: if the bytes are not a readable image.
        """
        if not self.data:
            raise AssetLoadError(f"Logo '{self.name}' is empty")
        try:
            img = Image.open(io.BytesIO(self.data))
            img.load()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise AssetLoadError(f"Could not decode logo '{self.name}': {e}") from e
        return img.convert("RGBA")

    async def load(self) -> Image.Image:
        """Decode off the event loop."""
        return await asyncio.to_thread(self.decode)


@trace
def fit_logo(logo: Image.Image, edge: int) -> Image.Image:
    """Scale a logo to fill an ``edge`` x ``edge`` square (aspect not preserved)."""
    return logo.resize((edge, edge), Image.LANCZOS)
