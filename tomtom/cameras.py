from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, MutableSequence, Optional

from PIL import Image

from common.bindable import BindableBase
from common.geo import haversine_m
from common.utils import iso_ms, utc_now


log = logging.getLogger(__name__)

# TomTom's orientation text is verbose ("Traffic closest to camera is traveling North");
# shorten to "Traveling North".
_ORIENTATION_VERBOSE = "Traffic closest to camera is t"
_ORIENTATION_SHORT = "T"


class CameraViewModel(BindableBase):
    """
    A camera as shown in the list panel and as a pin on the map.

    `image` and `last_refresh` raise change notifications; everything else is
    fixed once the result set is built. `sequence` is the 1-based rank within the
    current result set and is reassigned on every query.
    """

    def __init__(
        self,
        camera_id: int,
        name: str = "",
        orientation: str = "",
        refresh_rate: int = 0,
        latitude: float = 0.0,
        longitude: float = 0.0,
        distance_from_center: float = 0.0,
        sequence: int = 0,
    ) -> None:
        super().__init__()
        self.camera_id = camera_id
        self.sequence = sequence
        self.name = name
        self.orientation = orientation
        self.refresh_rate = refresh_rate
        self.latitude = latitude
        self.longitude = longitude
        self.distance_from_center = distance_from_center
        self._image: Optional[Image.Image] = None
        self._last_refresh: Optional[datetime] = None

    @property
    def image(self) -> Optional[Image.Image]:
        return self._image

    @image.setter
    def image(self, value: Optional[Image.Image]) -> None:
        self.set_property("image", value)

    @property
    def last_refresh(self) -> Optional[datetime]:
        return self._last_refresh

    @last_refresh.setter
    def last_refresh(self, value: Optional[datetime]) -> None:
        self.set_property("last_refresh", value)

    # Map pin contract
    @property
    def id(self) -> str:
        return str(self.camera_id)

    @property
    def label(self) -> str:
        return str(self.sequence)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view (no image bytes)."""
        return {
            "id": self.id,
            "label": self.label,
            "camera_id": self.camera_id,
            "sequence": self.sequence,
            "name": self.name,
            "orientation": self.orientation,
            "refresh_rate": self.refresh_rate,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "distance_from_center_m": self.distance_from_center,
            "has_image": self._image is not None,
            "last_refresh": iso_ms(self._last_refresh),
        }

    def __repr__(self) -> str:
        return (
            f"CameraViewModel(camera_id={self.camera_id}, sequence={self.sequence}, "
            f"name={self.name!r}, distance_from_center={self.distance_from_center:.1f})"
        )


# -------------------------
# Raw XML model
# -------------------------
@dataclass
class RawCamera:
    """One <camera> element of a box query response."""
    camera_id: int = 0
    camera_name: str = ""
    orientation: Optional[str] = None
    temp_disabled: bool = False
    refresh_rate: int = 0
    city_code: str = ""
    provider: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    zip_code: str = ""

    @classmethod
    def from_element(cls, el: ET.Element) -> "RawCamera":
        def text(tag: str) -> Optional[str]:
            child = el.find(tag)
            if child is None or child.text is None:
                return None
            return child.text.strip()

        def num(tag: str, conv, default):
            raw = text(tag)
            return default if raw in (None, "") else conv(raw)

        return cls(
            camera_id=num("cameraId", int, 0),
            camera_name=text("cameraName") or "",
            orientation=text("orientation"),
            temp_disabled=(text("tempDisabled") or "").lower() in ("true", "1"),
            refresh_rate=num("refreshRate", int, 0),
            city_code=text("cityCode") or "",
            provider=text("provider") or "",
            latitude=num("latitude", float, 0.0),
            longitude=num("longitude", float, 0.0),
            zip_code=text("zipCode") or "",
        )


@dataclass
class CamerasModel:
    """
    Deserialized <cameras> document.

    camera_list is None when the document carries no <camera> element at all.
    """
    camera_list: Optional[List[RawCamera]] = field(default=None)

    @classmethod
    def from_xml(cls, data: bytes | str) -> "CamerasModel":
        root = ET.fromstring(data)
        if root.tag != "cameras":
            raise ValueError(f"expected <cameras> root element, got <{root.tag}>")
        elements = root.findall("camera")
        if not elements:
            return cls(camera_list=None)
        return cls(camera_list=[RawCamera.from_element(el) for el in elements])


# -------------------------
# Projection: raw -> view-model
# -------------------------
def clean_orientation(orientation: Optional[str]) -> str:
    return (orientation or "").replace(_ORIENTATION_VERBOSE, _ORIENTATION_SHORT)


def populate_view_model(
    model: Optional[CamerasModel],
    view_model: MutableSequence[CameraViewModel],
    center_latitude: float,
    center_longitude: float,
    max_results: int = 0,
) -> bool:
    """
    Replace `view_model` contents with the cameras from `model`, closest first.

    Params:
        model: deserialized box-query result (None/empty -> no cameras)
        view_model: collection to repopulate; always cleared first
        center_latitude, center_longitude: map center used for ranking (deg)
        max_results: keep at most this many (0 = keep all)

    Returns:
        True if cameras were left out because of max_results.
    """
    view_model.clear()

    raw = (model.camera_list if model is not None else None) or []
    staging = [
        CameraViewModel(
            camera_id=c.camera_id,
            name=c.camera_name,
            orientation=clean_orientation(c.orientation),
            refresh_rate=c.refresh_rate,
            latitude=c.latitude,
            longitude=c.longitude,
            distance_from_center=haversine_m(center_latitude, center_longitude, c.latitude, c.longitude),
        )
        for c in raw
    ]

    # sorted() is stable: equal distances keep API order
    staging = sorted(staging, key=lambda c: c.distance_from_center)
    truncated = max_results > 0 and len(staging) > max_results
    if truncated:
        staging = staging[:max_results]

    for seq, cam in enumerate(staging, start=1):
        cam.sequence = seq
        view_model.append(cam)

    log.debug("Populated %d cameras (of %d, truncated=%s)", len(staging), len(raw), truncated)
    return truncated


def populate_image(cam_image: Optional[Image.Image], view_model: CameraViewModel) -> None:
    """Attach an image to a camera and stamp the refresh time (UTC)."""
    view_model.image = cam_image
    view_model.last_refresh = utc_now()
