"""Shared fixtures: a fast stand-in codec and small image helpers."""

import io

import pytest
from PIL import Image

from qrpro.codec import CodecLoader
from qrpro.surface import Surface


class SolidCodec:
    """Codec double that paints the whole canvas in the foreground colour."""

    def __init__(self):
        self.calls = []

    def encode(self, text, error_correction="H", size=300,
               foreground=(0, 0, 0), background=(255, 255, 255), style=None):
        self.calls.append({"text": text, "ecc": error_correction, "size": size, "style": style})
        return Image.new("RGB", (size, size), foreground)


def png_bytes(color=(255, 0, 0, 255), size=(32, 32)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def solid_codec():
    return SolidCodec()


@pytest.fixture
def solid_loader(solid_codec):
    return CodecLoader(factory=lambda: solid_codec)


@pytest.fixture
def surface():
    return Surface()


@pytest.fixture
def filled_surface():
    s = Surface()
    s.commit(Image.new("RGB", (200, 200), "white"))
    return s
