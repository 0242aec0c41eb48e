"""Value type tests: appearance validation, request variants, logo assets."""

import asyncio

import pytest

from conftest import png_bytes
from qrpro.errors import AssetLoadError
from qrpro.logo import LogoAsset
from qrpro.models import (
    AppearanceConfig,
    ContentType,
    Encryption,
    HistoryRecord,
    Style,
    UrlRequest,
    WifiRequest,
)


class TestAppearance:
    def test_defaults(self):
        a = AppearanceConfig()
        assert (a.fg_color, a.bg_color, a.size, a.style, a.logo) == ("#000000", "#ffffff", 300, Style.SQUARE, None)

    def test_normalizes_colours_and_style(self):
        a = AppearanceConfig(fg_color="FF0000", bg_color="#ABCDEF", style="dots")
        assert a.fg_color == "#ff0000"
        assert a.bg_color == "#abcdef"
        assert a.style is Style.DOTS

    @pytest.mark.parametrize("size", [200, 350, 500])
    def test_size_bounds_inclusive(self, size):
        assert AppearanceConfig(size=size).size == size

    @pytest.mark.parametrize("size", [199, 501, 0, -300])
    def test_size_out_of_bounds(self, size):
        with pytest.raises(ValueError):
            AppearanceConfig(size=size)

    def test_size_must_be_int(self):
        with pytest.raises(ValueError):
            AppearanceConfig(size=300.0)

    def test_bad_colour_and_style(self):
        with pytest.raises(ValueError):
            AppearanceConfig(fg_color="black")
        with pytest.raises(ValueError):
            AppearanceConfig(style="hexagons")

    def test_with_changes_revalidates(self):
        a = AppearanceConfig()
        assert a.with_changes(size=400).size == 400
        with pytest.raises(ValueError):
            a.with_changes(size=1000)


class TestRequests:
    def test_kind_tags(self):
        assert UrlRequest().kind is ContentType.URL
        assert WifiRequest().kind is ContentType.WIFI

    def test_equality_supports_replacement_checks(self):
        assert UrlRequest("a") == UrlRequest("a")
        assert UrlRequest("a") != UrlRequest("b")

    def test_encryption_coerced_from_string(self):
        assert WifiRequest(ssid="x", encryption="SAE").encryption is Encryption.SAE

    def test_unknown_encryption_rejected(self):
        with pytest.raises(ValueError):
            WifiRequest(ssid="x", encryption="WPA4")

    def test_encryption_set_is_fixed(self):
        assert [e.value for e in Encryption] == ["WPA", "WPA2-EAP", "WPA3", "SAE", "WEP", "nopass"]
        assert Encryption.WEP.description.startswith("Outdated")


def test_history_record_rejects_negative_reloads():
    with pytest.raises(ValueError):
        HistoryRecord(id=1, kind=ContentType.TEXT, payload="x", appearance=AppearanceConfig(), reload_count=-1)


class TestLogoAsset:
    def test_from_path_reads_bytes(self, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(png_bytes())
        asset = LogoAsset.from_path(path)
        assert asset.name == "logo.png"
        assert asset.decode().size == (32, 32)

    def test_missing_file(self, tmp_path):
        with pytest.raises(AssetLoadError):
            LogoAsset.from_path(tmp_path / "nope.png")

    def test_corrupt_bytes_fail_on_decode(self):
        asset = LogoAsset(data=b"definitely not a png", name="bad.png")
        with pytest.raises(AssetLoadError):
            asset.decode()

    def test_empty_bytes(self):
        with pytest.raises(AssetLoadError):
            LogoAsset(data=b"").decode()

    def test_async_load_returns_rgba(self):
        img = asyncio.run(LogoAsset(data=png_bytes()).load())
        assert img.mode == "RGBA"

    def test_repr_hides_bytes(self):
        assert repr(LogoAsset(data=b"abc", name="x")) == "LogoAsset(name='x', bytes=3)"
