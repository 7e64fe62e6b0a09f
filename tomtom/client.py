from __future__ import annotations

"""
TomTom Traffic Cams wrapper.

Usage:
    api = TomTomApi(TomTomConfig(api_key="..."))
    status = await api.get_cameras(BoundingBox(top=47.7, bottom=47.5, left=-122.4, right=-122.2), max_results=25)
    if status.is_success_status_code:
        for cam in api.cameras:          # closest to the box center first
            await api.get_camera_image(cam)
            # cam.image -> PIL image (or a placeholder), cam.last_refresh -> UTC datetime
"""

import logging
from http import HTTPStatus
from typing import Optional

import requests

from common.bindable import BindableBase, ObservableList
from common.types import ApiResponse, ApiResponseStatus, BoundingBox
from tomtom.api_base import ApiBase, ApiTransportError, Deserializers
from tomtom.assets import camera_error_image, camera_not_found_image
from tomtom.cameras import CamerasModel, CameraViewModel, populate_image, populate_view_model
from tomtom.config import TomTomConfig


log = logging.getLogger(__name__)

BOX_QUERY_PATH = "/trafficcams/boxquery?top={0}&bottom={1}&left={2}&right={3}&format=xml&key={4}"
FULL_CAM_PATH = "/trafficcams/getfullcam/{0}.jpg?key={1}"

MSG_FORBIDDEN = "Supplied API key is not valid for this request."
MSG_SERVER_ERROR = "Problem appears to be at TomTom's site. Please retry later."


class TomTomApi(ApiBase, BindableBase):
    """
    Owns the current camera result set (`cameras`) and the truncation flag.

    Overlapping get_cameras() calls are not coordinated here; the last one to
    complete wins. Callers that can overlap must serialize.
    """

    def __init__(self, config: TomTomConfig, session: Optional[requests.Session] = None):
        ApiBase.__init__(self, config, session)
        BindableBase.__init__(self)
        self._cameras: ObservableList[CameraViewModel] = ObservableList()
        self._camera_list_truncated = False

    @property
    def cameras(self) -> ObservableList[CameraViewModel]:
        """Cameras from the last query, ranked by distance from the box center."""
        return self._cameras

    @property
    def camera_list_truncated(self) -> bool:
        """True when the last query found more cameras than max_results allowed."""
        return self._camera_list_truncated

    @camera_list_truncated.setter
    def camera_list_truncated(self, value: bool) -> None:
        self.set_property("camera_list_truncated", value)

    async def get_cameras(self, box: BoundingBox, max_results: int = 0) -> ApiResponse[CamerasModel]:
        """
        Query traffic cameras inside `box`.

        Params:
            box: search area
            max_results: keep at most this many, closest first (0 = all)

        Returns:
            Status of the call; a failed status leaves `cameras` empty.
        """
        api_response = await self.invoke(
            CamerasModel,
            self.url(BOX_QUERY_PATH),
            box.top, box.bottom, box.left, box.right,
            self._api_key,
        )

        self._cameras.clear()
        self.camera_list_truncated = False

        if api_response.is_success_status_code:
            center_lat, center_lon = box.center
            self.camera_list_truncated = populate_view_model(
                api_response.deserialized_response,
                self._cameras,
                center_lat,
                center_lon,
                max_results,
            )
            log.info(
                "Box query returned %d cameras (truncated=%s)",
                len(self._cameras), self.camera_list_truncated,
            )
        elif api_response.status_code == HTTPStatus.FORBIDDEN:
            api_response.message = MSG_FORBIDDEN
        elif api_response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR:
            api_response.message = MSG_SERVER_ERROR

        return api_response

    async def get_camera_image(self, camera: CameraViewModel) -> ApiResponseStatus:
        """
        Fetch the latest snapshot for `camera` and attach it.

        Always succeeds: a 404 attaches the "not found" placeholder, any other
        failure the generic error placeholder.
        """
        # TomTom serves these without a usable Content-Type, so the decoder is explicit
        try:
            api_response = await self.invoke(
                None,
                self.url(FULL_CAM_PATH),
                camera.camera_id,
                self._api_key,
                deserializer=Deserializers.image,
            )
        except ApiTransportError as e:
            api_response = ApiResponse(
                is_success_status_code=False,
                status_code=int(HTTPStatus.BAD_GATEWAY),
                message=str(e),
            )

        if api_response.is_success_status_code:
            cam_image = api_response.deserialized_response
        elif api_response.status_code == HTTPStatus.NOT_FOUND:
            log.info("No image for camera %s; using placeholder", camera.camera_id)
            cam_image = camera_not_found_image()
        else:
            log.info(
                "Image fetch for camera %s failed (%s %s); using placeholder",
                camera.camera_id, api_response.status_code, api_response.message,
            )
            cam_image = camera_error_image()

        populate_image(cam_image, camera)

        return ApiResponseStatus.default()
