"""Value types: content requests, appearance and history records."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Union

from qrpro.contrast import parse_hex
from qrpro.logo import LogoAsset

SIZE_MIN = 200
SIZE_MAX = 500

Payload = str


class ContentType(Enum):
    URL = "url"
    TEXT = "text"
    CONTACT = "contact"
    WIFI = "wifi"


class Encryption(Enum):
    """Wi-Fi authentication types accepted in the WIFI: T field."""

    WPA = ("WPA", "Standard security for most home networks")
    WPA2_EAP = ("WPA2-EAP", "Enterprise networks with authentication server")
    WPA3 = ("WPA3", "Latest security standard, not all devices support it yet")
    SAE = ("SAE", "Modern personal network security")
    WEP = ("WEP", "Outdated and insecure, only for legacy devices")
    NOPASS = ("nopass", "No password required, not secure")

    def __new__(cls, value: str, description: str):
        obj = object.__new__(cls)
        obj._value_ = value
        obj.description = description
        return obj


class Style(Enum):
    SQUARE = "square"
    ROUNDED = "rounded"
    DOTS = "dots"


# ---------------------------------------------------------------------------
# Content requests (exactly one is active at a time)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UrlRequest:
    raw: str = ""
    kind: ClassVar[ContentType] = ContentType.URL


@dataclass(frozen=True)
class TextRequest:
    raw: str = ""
    kind: ClassVar[ContentType] = ContentType.TEXT


@dataclass(frozen=True)
class ContactRequest:
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    organization: str = ""
    kind: ClassVar[ContentType] = ContentType.CONTACT


@dataclass(frozen=True)
class WifiRequest:
    ssid: str = ""
    password: str = ""
    encryption: Encryption = Encryption.WPA
    hidden: bool = False
    kind: ClassVar[ContentType] = ContentType.WIFI

    def __post_init__(self):
        if not isinstance(self.encryption, Encryption):
            object.__setattr__(self, "encryption", Encryption(self.encryption))


ContentRequest = Union[UrlRequest, TextRequest, ContactRequest, WifiRequest]


# ---------------------------------------------------------------------------
# Appearance
# ---------------------------------------------------------------------------

def _normalize_color(value: str) -> str:
    r, g, b = parse_hex(value)
    return f"#{r:02x}{g:02x}{b:02x}"


@dataclass(frozen=True)
class AppearanceConfig:
    """How a payload is drawn. Validated on construction."""

    fg_color: str = "#000000"
    bg_color: str = "#ffffff"
    size: int = 300
    style: Style = Style.SQUARE
    logo: LogoAsset | None = None

    def __post_init__(self):
        object.__setattr__(self, "fg_color", _normalize_color(self.fg_color))
        object.__setattr__(self, "bg_color", _normalize_color(self.bg_color))
        if isinstance(self.size, bool) or not isinstance(self.size, int):
            raise ValueError(f"size must be an integer, got {self.size!r}")
        if not SIZE_MIN <= self.size <= SIZE_MAX:
            raise ValueError(f"size must be within [{SIZE_MIN}, {SIZE_MAX}], got {self.size}")
        if not isinstance(self.style, Style):
            object.__setattr__(self, "style", Style(self.style))

    def with_changes(self, **changes) -> "AppearanceConfig":
        return replace(self, **changes)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HistoryRecord:
    id: int
    kind: ContentType
    payload: Payload
    appearance: AppearanceConfig
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reload_count: int = 0

    def __post_init__(self):
        if self.reload_count < 0:
            raise ValueError(f"reload_count must be non-negative, got {self.reload_count}")
