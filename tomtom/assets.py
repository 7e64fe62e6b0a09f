from __future__ import annotations

"""
Stock images shown in place of a camera snapshot.

Both are built once per process and shared; treat them as read-only.
"""

from functools import lru_cache
from typing import Tuple

from PIL import Image, ImageDraw


PLACEHOLDER_SIZE: Tuple[int, int] = (320, 240)


def _placeholder(caption: str, background: Tuple[int, int, int]) -> Image.Image:
    img = Image.new("RGB", PLACEHOLDER_SIZE, background)
    draw = ImageDraw.Draw(img)
    w, h = PLACEHOLDER_SIZE
    # crossed-out frame
    draw.rectangle([8, 8, w - 9, h - 9], outline=(255, 255, 255), width=3)
    draw.line([8, 8, w - 9, h - 9], fill=(255, 255, 255), width=2)
    draw.line([8, h - 9, w - 9, 8], fill=(255, 255, 255), width=2)
    left, top, right, bottom = draw.textbbox((0, 0), caption)
    tw, th = right - left, bottom - top
    pad = 6
    box = [(w - tw) // 2 - pad, (h - th) // 2 - pad, (w + tw) // 2 + pad, (h + th) // 2 + pad]
    draw.rectangle(box, fill=background)
    draw.text(((w - tw) // 2, (h - th) // 2), caption, fill=(255, 255, 255))
    return img


@lru_cache(maxsize=None)
def camera_not_found_image() -> Image.Image:
    """Shown when the API has no image for the camera (HTTP 404)."""
    return _placeholder("Camera not found", (96, 96, 96))


@lru_cache(maxsize=None)
def camera_error_image() -> Image.Image:
    """Shown for any other failed image fetch."""
    return _placeholder("Camera error", (160, 40, 40))
