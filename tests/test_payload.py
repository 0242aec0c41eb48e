"""PayloadBuilder tests."""

import pytest

from qrpro.errors import ValidationError
from qrpro.models import ContactRequest, Encryption, TextRequest, UrlRequest, WifiRequest
from qrpro.payload import build, build_contact, build_url, build_wifi, is_valid, missing_fields


class TestUrl:
    def test_adds_https_when_scheme_missing(self):
        assert build_url(UrlRequest("example.com")) == "https://example.com"

    def test_keeps_existing_scheme(self):
        assert build_url(UrlRequest("ftp://x")) == "ftp://x"
        assert build_url(UrlRequest("http://example.com/a?b=1")) == "http://example.com/a?b=1"

    def test_trims_whitespace(self):
        assert build_url(UrlRequest("  example.com/path \n")) == "https://example.com/path"
        assert build_url(UrlRequest("  https://example.com  ")) == "https://example.com"

    @pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
    def test_blank_fails(self, raw):
        with pytest.raises(ValidationError) as exc:
            build_url(UrlRequest(raw))
        assert exc.value.kind == "url"
        assert exc.value.missing == ("raw",)


class TestText:
    def test_passes_through_unchanged(self):
        assert build(TextRequest("  hello\nworld ")) == "  hello\nworld "

    def test_whitespace_only_fails(self):
        with pytest.raises(ValidationError):
            build(TextRequest("   "))


class TestContact:
    def test_name_only_omits_optional_lines(self):
        vcard = build_contact(ContactRequest(first_name="John", last_name="Doe"))
        lines = vcard.split("\n")
        assert lines == [
            "BEGIN:VCARD",
            "VERSION:3.0",
            "N:Doe;John;;;",
            "FN:John Doe",
            "END:VCARD",
        ]
        assert "ORG" not in vcard and "TEL" not in vcard and "EMAIL" not in vcard
        assert "" not in lines

    def test_full_contact(self):
        vcard = build_contact(ContactRequest(
            first_name="Ada", last_name="Lovelace", phone="+1234567890",
            email="ada@example.com", organization="Analytical Engines",
        ))
        assert vcard == (
            "BEGIN:VCARD\n"
            "VERSION:3.0\n"
            "N:Lovelace;Ada;;;\n"
            "FN:Ada Lovelace\n"
            "ORG:Analytical Engines\n"
            "TEL:+1234567890\n"
            "EMAIL:ada@example.com\n"
            "END:VCARD"
        )

    def test_phone_alone_is_enough(self):
        vcard = build(ContactRequest(phone="555"))
        assert "TEL:555" in vcard
        assert "N:;;;;" in vcard

    def test_organization_alone_is_not_enough(self):
        request = ContactRequest(organization="ACME")
        assert not is_valid(request)
        with pytest.raises(ValidationError) as exc:
            build(request)
        assert exc.value.missing == ("first_name", "last_name", "phone", "email")


class TestWifi:
    def test_wpa(self):
        request = WifiRequest(ssid="Net", password="p", encryption="WPA", hidden=False)
        assert build_wifi(request) == "WIFI:T:WPA;S:Net;P:p;H:false;"

    def test_hidden_enterprise(self):
        request = WifiRequest(ssid="Corp", password="s3cret", encryption=Encryption.WPA2_EAP, hidden=True)
        assert build(request) == "WIFI:T:WPA2-EAP;S:Corp;P:s3cret;H:true;"

    def test_open_network(self):
        assert build(WifiRequest(ssid="Cafe", encryption="nopass")) == "WIFI:T:nopass;S:Cafe;P:;H:false;"

    def test_blank_ssid_fails(self):
        with pytest.raises(ValidationError) as exc:
            build(WifiRequest(ssid=" ", password="p"))
        assert exc.value.missing == ("ssid",)


def test_is_valid_tracks_each_edit():
    assert not is_valid(UrlRequest())
    assert is_valid(UrlRequest("a"))
    assert not is_valid(WifiRequest())
    assert is_valid(WifiRequest(ssid="x"))
    assert missing_fields(TextRequest("hi")) == ()


def test_unknown_request_type_rejected():
    with pytest.raises(TypeError):
        build("example.com")
