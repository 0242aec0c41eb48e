"""Error taxonomy shared by the payload, render and export layers."""


class QRProError(Exception):
    """Base class for recoverable QR Pro errors."""


class ValidationError(QRProError, ValueError):
    """Required field(s) missing for the active content type."""

    def __init__(self, kind: str, missing: tuple[str, ...] | list[str], message: str | None = None):
        self.kind = kind
        self.missing = tuple(missing)
        if message is None:
            message = f"{kind}: missing required field(s): {', '.join(self.missing)}"
        super().__init__(message)


class RenderError(QRProError):
    """Drawing surface unavailable or the code renderer failed to load."""


class AssetLoadError(QRProError):
    """A logo image could not be read or decoded."""


class ShareError(QRProError):
    """The OS share capability is unsupported, failed, or was cancelled."""

    def __init__(self, message: str = "Share failed", cancelled: bool = False):
        self.cancelled = cancelled
        super().__init__(message)


class ClipboardError(QRProError):
    """The clipboard capability is unsupported or rejected the image."""
