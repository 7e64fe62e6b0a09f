from __future__ import annotations

import asyncio
import io
import logging
from typing import Optional, Tuple

import uvicorn
from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware

from common.logging_setup import setup_logging
from common.types import BoundingBox
from common.utils import iso_ms
from tomtom.api_base import ApiTransportError
from tomtom.cameras import CameraViewModel
from tomtom.client import TomTomApi
from tomtom.config import DEFAULT_CONFIG_PATH, load_config, read_yaml


log = logging.getLogger(__name__)


def _build_default_api(path: str = DEFAULT_CONFIG_PATH) -> Tuple[Optional[TomTomApi], Optional[str]]:
    try:
        return TomTomApi(load_config(path)), None
    except ValueError as e:
        return None, str(e)


def create_app(
    api: Optional[TomTomApi] = None,
    init_error: Optional[str] = None,
    default_max_results: int = 25,
) -> FastAPI:
    """
    JSON/PNG surface over a single TomTomApi instance.

    The instance owns one result set, so box queries are serialized with a lock.
    Without an api (missing key) every data endpoint answers 503.
    """
    app = FastAPI(title="Traffic Cams API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten as needed
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    query_lock = asyncio.Lock()

    def _unavailable() -> JSONResponse:
        return JSONResponse({"error": "tomtom_unavailable", "detail": init_error}, status_code=503)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "tomtom": {
                "available": api is not None,
                "init_error": init_error,
                "cameras": len(api.cameras) if api is not None else 0,
                "truncated": api.camera_list_truncated if api is not None else False,
            },
        }

    @app.get("/cameras")
    async def cameras(
        top: float = Query(...),
        bottom: float = Query(...),
        left: float = Query(...),
        right: float = Query(...),
        max_results: int = Query(default_max_results, ge=0),
    ):
        if api is None:
            return _unavailable()
        box = BoundingBox(top=top, bottom=bottom, left=left, right=right)
        async with query_lock:
            try:
                status = await api.get_cameras(box, max_results=max_results)
            except ApiTransportError as e:
                return JSONResponse({"error": "tomtom_transport", "detail": str(e)}, status_code=502)
            if not status.is_success_status_code:
                return JSONResponse(
                    {"error": "tomtom_failed", **status.status().to_dict()},
                    # a 2xx that failed to deserialize is still an upstream failure
                    status_code=status.status_code if status.status_code >= 400 else 502,
                )
            center_lat, center_lon = box.center
            return {
                "center": {"lat": center_lat, "lon": center_lon},
                "truncated": api.camera_list_truncated,
                "cameras": [c.to_dict() for c in api.cameras],
            }

    @app.get("/cameras/{camera_id}/image")
    async def camera_image(camera_id: int):
        """
        Latest snapshot as PNG. Always 200: missing or failed images come back as
        placeholders. `X-Last-Refresh` carries the fetch time.
        """
        if api is None:
            return _unavailable()
        cam = next((c for c in api.cameras if c.camera_id == camera_id), None)
        if cam is None:
            # not part of the current result set; fetch anyway
            cam = CameraViewModel(camera_id=camera_id)
        await api.get_camera_image(cam)
        buf = io.BytesIO()
        cam.image.convert("RGB").save(buf, format="PNG")
        headers = {
            "X-Last-Refresh": iso_ms(cam.last_refresh) or "",
            "Cache-Control": f"max-age={max(cam.refresh_rate, 0)}",
        }
        return Response(content=buf.getvalue(), media_type="image/png", headers=headers)

    return app


P = read_yaml(DEFAULT_CONFIG_PATH)
setup_logging(P.get("logging", {}).get("level"))
_api, _init_err = _build_default_api()
app = create_app(
    _api,
    _init_err,
    default_max_results=int(P.get("server", {}).get("default_max_results", 25)),
)


# -------- local dev entrypoint --------
if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
