"""Rendered codes must still decode, with and without a logo."""

import pytest
from PIL import Image

from conftest import png_bytes
from qrpro.logo import LogoAsset
from qrpro.models import AppearanceConfig
from qrpro.render import RenderCompositor
from qrpro.verify import scan_opencv, verify, verify_surface

PAYLOAD = "https://example.com"


@pytest.mark.asyncio
async def test_plain_code_decodes(surface):
    await RenderCompositor().render(PAYLOAD, AppearanceConfig(size=300), surface)
    result = scan_opencv(surface.snapshot())
    assert result.success, result.error
    assert result.decoded_data == PAYLOAD


@pytest.mark.asyncio
async def test_logo_occlusion_still_decodes(surface):
    appearance = AppearanceConfig(size=400, logo=LogoAsset(data=png_bytes(color=(200, 0, 0, 255))))
    await RenderCompositor().render(PAYLOAD, appearance, surface)
    assert surface.commits == 2
    assert verify_surface(surface, expected_data=PAYLOAD, decoders=("opencv",))


@pytest.mark.asyncio
async def test_expected_data_mismatch_fails(surface):
    await RenderCompositor().render(PAYLOAD, AppearanceConfig(size=300), surface)
    [result] = verify(surface.snapshot(), expected_data="https://other.example", decoders=("opencv",))
    assert not result.success
    assert "mismatch" in result.error


def test_blank_image_has_no_code():
    result = scan_opencv(Image.new("RGB", (200, 200), "white"))
    assert not result.success
    assert result.decoder == "opencv"
