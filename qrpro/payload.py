"""Payload construction: turn a content request into the exact string to encode."""

import re

from qrpro.errors import ValidationError
from qrpro.logging import audit, get_logger
from qrpro.models import (
    ContactRequest,
    ContentRequest,
    Payload,
    TextRequest,
    UrlRequest,
    WifiRequest,
)

log = get_logger("payload")

_SCHEME_RE = re.compile(r"^[a-zA-Z]+://")


def _blank(value: str | None) -> bool:
    return not value or not value.strip()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def missing_fields(request: ContentRequest) -> tuple[str, ...]:
    """Names of the required fields that are blank for this request.

    For contacts any one of first name, last name, phone or email suffices,
    so all four are reported only when every one of them is blank.
    """
    if isinstance(request, (UrlRequest, TextRequest)):
        return ("raw",) if _blank(request.raw) else ()
    if isinstance(request, ContactRequest):
        names = ("first_name", "last_name", "phone", "email")
        if all(_blank(getattr(request, n)) for n in names):
            return names
        return ()
    if isinstance(request, WifiRequest):
        return ("ssid",) if _blank(request.ssid) else ()
    raise TypeError(f"Unsupported content request: {type(request).__name__}")


def is_valid(request: ContentRequest) -> bool:
    """True when ``build`` would succeed; cheap enough to call on every edit."""
    return not missing_fields(request)


def _require(request: ContentRequest) -> None:
    missing = missing_fields(request)
    if missing:
        raise ValidationError(request.kind.value, missing)


# ---------------------------------------------------------------------------
# Per-type encoders
# ---------------------------------------------------------------------------

def build_url(request: UrlRequest) -> Payload:
    """Trimmed URL; ``https://`` is prepended unless a scheme is already present."""
    _require(request)
    trimmed = request.raw.strip()
    if _SCHEME_RE.match(trimmed):
        return trimmed
    return f"https://{trimmed}"


def build_text(request: TextRequest) -> Payload:
    _require(request)
    return request.raw


def build_contact(request: ContactRequest) -> Payload:
    """vCard 3.0 with ORG/TEL/EMAIL lines only for non-empty fields."""
    _require(request)
    first, last = request.first_name, request.last_name
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"N:{last};{first};;;",
        f"FN:{first} {last}",
        f"ORG:{request.organization}" if request.organization else "",
        f"TEL:{request.phone}" if request.phone else "",
        f"EMAIL:{request.email}" if request.email else "",
        "END:VCARD",
    ]
    return "\n".join(line for line in lines if line)


def build_wifi(request: WifiRequest) -> Payload:
    _require(request)
    hidden = "true" if request.hidden else "false"
    return f"WIFI:T:{request.encryption.value};S:{request.ssid};P:{request.password};H:{hidden};"


_BUILDERS = {
    UrlRequest: build_url,
    TextRequest: build_text,
    ContactRequest: build_contact,
    WifiRequest: build_wifi,
}


def build(request: ContentRequest) -> Payload:
    """Build the payload for any content request.

    Raises:
        ValidationError: if a required field is blank.
        TypeError: if ``request`` is not one of the content request types.
    """
    builder = _BUILDERS.get(type(request))
    if builder is None:
        raise TypeError(f"Unsupported content request: {type(request).__name__}")
    payload = builder(request)
    audit("payload.built", logger=log, kind=request.kind.value, length=len(payload))
    return payload
