"""Export the rendered code: download to a PNG file or share with clipboard fallback."""

import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from qrpro.errors import ClipboardError, ShareError
from qrpro.logging import audit, get_logger, trace
from qrpro.surface import Surface

log = get_logger("export")

SHARE_TITLE = "QR Code"
SHARE_TEXT = "Check out this QR code!"

MSG_COPIED = "QR code copied to clipboard! You can now paste it anywhere."
MSG_COPY_FAILED = "Unable to share or copy. Please use the Download button instead."
MSG_UNSUPPORTED = (
    "Share and copy features are not supported here. Please use the Download button instead."
)


class Sharer(Protocol):
    def can_share(self) -> bool: ...

    def share(self, png: bytes, title: str, text: str) -> None:
        """Raise ShareError on failure or ShareError(cancelled=True) on user cancel."""


class Clipboard(Protocol):
    def copy_image(self, png: bytes) -> None:
        """Raise ClipboardError when the image cannot be copied."""


class ShareMethod(Enum):
    SHARED = "shared"
    CLIPBOARD = "clipboard"
    NONE = "none"


@dataclass(frozen=True)
class ShareOutcome:
    method: ShareMethod
    message: str | None = None

    @property
    def delivered(self) -> bool:
        return self.method is not ShareMethod.NONE


def download_filename(now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"qrcode-{now_ms}.png"


@trace
def download(surface: Surface, directory: str | Path = ".", now_ms: int | None = None) -> Path:
    """Write the committed frame to ``<directory>/qrcode-<unix-ms>.png``.

    Raises:
        RenderError: if nothing has been rendered yet.
    """
    png = surface.to_png()
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / download_filename(now_ms)
    path.write_bytes(png)
    audit("export.downloaded", logger=log, path=str(path), bytes=len(png))
    return path


def _copy(png: bytes, clipboard: Clipboard | None) -> ShareOutcome:
    if clipboard is None:
        audit("export.unsupported", logger=log)
        return ShareOutcome(ShareMethod.NONE, MSG_UNSUPPORTED)
    try:
        clipboard.copy_image(png)
    except ClipboardError as e:
        log.warning("Clipboard copy failed: %s", e)
        return ShareOutcome(ShareMethod.NONE, MSG_COPY_FAILED)
    audit("export.copied", logger=log, bytes=len(png))
    return ShareOutcome(ShareMethod.CLIPBOARD, MSG_COPIED)


def share(surface: Surface, sharer: Sharer | None = None, clipboard: Clipboard | None = None) -> ShareOutcome:
    """Share the committed frame, falling back to the clipboard.

    The share capability is tried first; if it is missing, unsupported,
    fails or is cancelled, the image goes to the clipboard; if that is not
    possible either, the outcome carries a message pointing at download.

    Raises:
        RenderError: if nothing has been rendered yet.
    """
    png = surface.to_png()
    if sharer is not None and sharer.can_share():
        try:
            sharer.share(png, SHARE_TITLE, SHARE_TEXT)
        except ShareError as e:
            audit("export.share_failed", logger=log, cancelled=e.cancelled, error=str(e))
        else:
            audit("export.shared", logger=log, bytes=len(png))
            return ShareOutcome(ShareMethod.SHARED)
    return _copy(png, clipboard)
