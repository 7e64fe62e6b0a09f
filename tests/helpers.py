"""
Canned TomTom responses for unit tests.
"""

import io
from typing import Dict, Optional
from unittest.mock import Mock

from PIL import Image


def make_camera_xml(*cameras: Dict) -> bytes:
    """Render a <cameras> document; each dict maps TomTom element names to values."""
    parts = ["<?xml version=\"1.0\" encoding=\"UTF-8\"?>", "<cameras>"]
    for cam in cameras:
        parts.append("<camera>")
        for tag, value in cam.items():
            parts.append(f"<{tag}>{value}</{tag}>")
        parts.append("</camera>")
    parts.append("</cameras>")
    return "".join(parts).encode("utf-8")


def make_jpeg(size=(8, 6), color=(10, 120, 200)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="JPEG")
    return buf.getvalue()


def make_response(
    status_code: int = 200,
    content: bytes = b"",
    content_type: Optional[str] = "text/xml",
    reason: str = "OK",
) -> Mock:
    """Stand-in for requests.Response."""
    r = Mock()
    r.status_code = status_code
    r.content = content
    r.reason = reason
    r.headers = {"Content-Type": content_type} if content_type else {}
    return r
