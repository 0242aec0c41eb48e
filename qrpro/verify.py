"""Scan verification: decode a rendered code to confirm it still reads back."""

import time
from dataclasses import dataclass

import cv2
import numpy as np
from PIL import Image

from qrpro.logging import audit, get_logger, trace
from qrpro.surface import Surface

log = get_logger("verify")


@dataclass
class ScanResult:
    """Result of a single scan attempt."""
    success: bool
    decoded_data: str | None = None
    decode_time_ms: float = 0.0
    decoder: str = ""
    error: str | None = None
    skipped: bool = False


@trace
def scan_pyzbar(image: Image.Image) -> ScanResult:
    """Scan a QR code using pyzbar (wraps ZBar). Skipped if the ZBar library is missing."""
    start = time.perf_counter()
    try:
        from pyzbar.pyzbar import decode as pyzbar_decode
    except ImportError as e:
        return ScanResult(success=False, decoder="pyzbar/zbar", error=f"decoder unavailable: {e}", skipped=True)

    try:
        results = pyzbar_decode(image)
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        audit("scan.error", logger=log, decoder="pyzbar/zbar", error=str(e), time_ms=round(elapsed, 1))
        return ScanResult(success=False, decode_time_ms=elapsed, decoder="pyzbar/zbar", error=str(e))

    elapsed = (time.perf_counter() - start) * 1000
    if results:
        data = results[0].data.decode("utf-8", errors="replace")
        audit("scan.verified", logger=log, decoder="pyzbar/zbar", success=True, time_ms=round(elapsed, 1), data=data[:80])
        return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed, decoder="pyzbar/zbar")
    audit("scan.verified", logger=log, decoder="pyzbar/zbar", success=False, time_ms=round(elapsed, 1))
    return ScanResult(success=False, decode_time_ms=elapsed, decoder="pyzbar/zbar", error="No QR code detected")


@trace
def scan_opencv(image: Image.Image) -> ScanResult:
    """Scan a QR code using OpenCV's built-in QR detector."""
    start = time.perf_counter()
    try:
        arr = np.array(image.convert("RGB"))
        gray = cv2.cvtColor(arr, cv2.COLOR_RGB2GRAY)
        detector = cv2.QRCodeDetector()
        data, _points, _ = detector.detectAndDecode(gray)
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        audit("scan.error", logger=log, decoder="opencv", error=str(e), time_ms=round(elapsed, 1))
        return ScanResult(success=False, decode_time_ms=elapsed, decoder="opencv", error=str(e))

    elapsed = (time.perf_counter() - start) * 1000
    if data:
        audit("scan.verified", logger=log, decoder="opencv", success=True, time_ms=round(elapsed, 1), data=data[:80])
        return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed, decoder="opencv")
    audit("scan.verified", logger=log, decoder="opencv", success=False, time_ms=round(elapsed, 1))
    return ScanResult(success=False, decode_time_ms=elapsed, decoder="opencv", error="No QR code detected")


SCANNERS = {"pyzbar": scan_pyzbar, "opencv": scan_opencv}


@trace
def verify(image: Image.Image, expected_data: str | None = None, decoders=("pyzbar", "opencv")) -> list[ScanResult]:
    """Run the chosen decoders on an image.

    Args:
        image: PIL Image containing a QR code.
        expected_data: If provided, marks result as failure if decoded data doesn't match.
        decoders: Names from ``SCANNERS``.

    Returns:
        List of ScanResults, one per decoder.
    """
    results = []
    for name in decoders:
        result = SCANNERS[name](image)
        if result.success and expected_data is not None and result.decoded_data != expected_data:
            result.success = False
            result.error = f"Data mismatch: got '{result.decoded_data}', expected '{expected_data}'"
        results.append(result)
    return results


def verify_surface(surface: Surface, expected_data: str | None = None, decoders=("pyzbar", "opencv")) -> bool:
    """True if any decoder reads the committed frame (and matches ``expected_data``)."""
    return any(r.success for r in verify(surface.snapshot(), expected_data, decoders))
