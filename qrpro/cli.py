"""QR Pro CLI: build a payload, render it and write the PNG."""

import argparse
import asyncio
import sys
from pathlib import Path

from PIL import Image

from qrpro.config import load_settings
from qrpro.contrast import check
from qrpro.errors import QRProError
from qrpro.logging import audit, get_logger, setup_logging
from qrpro.logo import LogoAsset
from qrpro.models import (
    AppearanceConfig,
    ContactRequest,
    Encryption,
    Style,
    TextRequest,
    UrlRequest,
    WifiRequest,
)

log = get_logger("cli")


def _request_from_args(args):
    if args.kind == "url":
        return UrlRequest(raw=args.url)
    if args.kind == "text":
        return TextRequest(raw=args.text)
    if args.kind == "contact":
        return ContactRequest(
            first_name=args.first_name,
            last_name=args.last_name,
            phone=args.phone,
            email=args.email,
            organization=args.organization,
        )
    return WifiRequest(
        ssid=args.ssid,
        password=args.password,
        encryption=Encryption(args.encryption),
        hidden=args.hidden,
    )


def _appearance_from_args(args) -> AppearanceConfig:
    logo = LogoAsset.from_path(args.logo) if args.logo else None
    return AppearanceConfig(
        fg_color=args.fg,
        bg_color=args.bg,
        size=args.size,
        style=Style(args.style),
        logo=logo,
    )


async def _generate(args, settings) -> int:
    from qrpro.export import download
    from qrpro.session import GeneratorSession

    session = GeneratorSession(settings=settings)
    result = await session.generate(_request_from_args(args), _appearance_from_args(args))
    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    report = session.contrast
    if not report.ok:
        print(f"Warning: {report.message}", file=sys.stderr)

    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        session.surface.snapshot().save(output)
    else:
        output = download(session.surface, args.output_dir or settings.output_dir)

    size = session.appearance.size
    print(f"Generated: {output} ({size}x{size}, style={session.appearance.style.value})")
    print(f"Payload:   {result.payload!r}")

    if args.verify:
        from qrpro.verify import verify

        return _report_scans(verify(session.surface.snapshot(), expected_data=result.payload))
    return 0


def _report_scans(results) -> int:
    """Print one line per decoder.

    Decoders that are not installed do not fail the run, but at least one
    decoder must read the code.
    """
    all_pass = True
    decoded = False
    for r in results:
        status = "SKIP" if r.skipped else ("PASS" if r.success else "FAIL")
        if not (r.success or r.skipped):
            all_pass = False
        decoded = decoded or r.success
        print(f"  [{r.decoder:12s}] {status} | {r.decode_time_ms:6.1f}ms | {r.decoded_data or r.error}")
    if not decoded:
        print("  No decoder read the code")
    return 0 if all_pass and decoded else 1


def cmd_generate(args, settings) -> int:
    """Generate a QR code."""
    return asyncio.run(_generate(args, settings))


def cmd_contrast(args, settings) -> int:
    """Score a foreground/background colour pair."""
    report = check(args.fg, args.bg, settings.min_contrast)
    print(f"Contrast ratio: {report.ratio:.2f}:1")
    if not report.ok:
        print(f"Warning: {report.message}")
        return 1
    return 0


def cmd_verify(args, settings) -> int:
    """Verify a QR code image."""
    from qrpro.verify import verify

    with Image.open(args.image) as img:
        return _report_scans(verify(img, expected_data=args.expected))


def _add_appearance_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--fg", default="#000000", help="Foreground colour (hex)")
    p.add_argument("--bg", default="#ffffff", help="Background colour (hex)")
    p.add_argument("--size", type=int, default=300, help="Image edge in pixels (200-500)")
    p.add_argument("--style", default="square", choices=[s.value for s in Style], help="Module style")
    p.add_argument("--logo", default=None, help="Path to a logo image to place in the centre")
    p.add_argument("-o", "--output", default=None, help="Output file path")
    p.add_argument("--output-dir", default=None, help="Directory for qrcode-<ms>.png (when -o is omitted)")
    p.add_argument("--verify", action="store_true", help="Decode the result and check it matches")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrpro", description="QR Pro: customizable QR code generator")

    # Global logging flags
    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")
    parser.add_argument("--json-logs", action="store_true", help="JSON logs on the console too")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate ---
    p_gen = subparsers.add_parser("generate", help="Generate a QR code")
    kinds = p_gen.add_subparsers(dest="kind", required=True, help="Content type")

    p_url = kinds.add_parser("url", help="Website URL (https:// added when missing)")
    p_url.add_argument("url")
    _add_appearance_flags(p_url)

    p_text = kinds.add_parser("text", help="Free text")
    p_text.add_argument("text")
    _add_appearance_flags(p_text)

    p_contact = kinds.add_parser("contact", help="vCard contact")
    p_contact.add_argument("--first-name", default="")
    p_contact.add_argument("--last-name", default="")
    p_contact.add_argument("--phone", default="")
    p_contact.add_argument("--email", default="")
    p_contact.add_argument("--organization", default="")
    _add_appearance_flags(p_contact)

    p_wifi = kinds.add_parser("wifi", help="Wi-Fi network credentials")
    p_wifi.add_argument("ssid")
    p_wifi.add_argument("--password", default="")
    p_wifi.add_argument("--encryption", default="WPA", choices=[e.value for e in Encryption])
    p_wifi.add_argument("--hidden", action="store_true", help="Network does not broadcast its SSID")
    _add_appearance_flags(p_wifi)

    # --- contrast ---
    p_con = subparsers.add_parser("contrast", help="Check a colour pair for scannability")
    p_con.add_argument("fg", help="Foreground colour (hex)")
    p_con.add_argument("bg", help="Background colour (hex)")

    # --- verify ---
    p_ver = subparsers.add_parser("verify", help="Verify a QR code image")
    p_ver.add_argument("image", help="Path to QR code image")
    p_ver.add_argument("--expected", default=None, help="Expected decoded data (fails if mismatch)")

    return parser


def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Setup logging before any command runs
    level = "DEBUG" if args.verbose else settings.log_level
    setup_logging(level=level, log_file=args.log_file or settings.log_file,
                  json_format=args.json_logs or settings.json_logs)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "generate": cmd_generate,
        "contrast": cmd_contrast,
        "verify": cmd_verify,
    }
    try:
        code = commands[args.command](args, settings)
    except (QRProError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1
    audit("cli.done", logger=log, command=args.command, code=code)
    return code


if __name__ == "__main__":
    sys.exit(main())
