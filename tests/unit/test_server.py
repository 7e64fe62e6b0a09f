"""
Unit tests for the FastAPI surface
"""

import io
import os
import sys

import pytest
import requests
from fastapi.testclient import TestClient
from PIL import Image

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from tests.helpers import make_camera_xml, make_jpeg, make_response
from tomtom.client import MSG_FORBIDDEN, TomTomApi
from tomtom.server import create_app


CAMERAS = make_camera_xml(
    {"cameraId": 2, "cameraName": "Far", "latitude": 9.0, "longitude": 5.0, "refreshRate": 60},
    {"cameraId": 1, "cameraName": "Near", "latitude": 5.5, "longitude": 5.0, "refreshRate": 30},
)
BOX_PARAMS = {"top": 10, "bottom": 0, "left": 0, "right": 10}


@pytest.fixture
def api(config, session):
    return TomTomApi(config, session=session)


@pytest.fixture
def client(api):
    return TestClient(create_app(api))


class TestHealth:
    """Test cases for /health"""

    def test_available(self, client):
        """Configured api reports available"""
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["tomtom"]["available"] is True

    def test_unavailable(self):
        """Missing configuration is reported, data endpoints answer 503"""
        client = TestClient(create_app(None, "TomTom API key is required"))

        health = client.get("/health").json()
        assert health["tomtom"]["available"] is False
        assert "API key" in health["tomtom"]["init_error"]

        r = client.get("/cameras", params=BOX_PARAMS)
        assert r.status_code == 503
        assert r.json()["error"] == "tomtom_unavailable"


class TestCamerasEndpoint:
    """Test cases for /cameras"""

    def test_ranked_json(self, client, session):
        """Cameras are returned closest first with sequence labels"""
        session.get.return_value = make_response(content=CAMERAS)

        r = client.get("/cameras", params={**BOX_PARAMS, "max_results": 0})

        assert r.status_code == 200
        body = r.json()
        assert body["center"] == {"lat": 5.0, "lon": 5.0}
        assert body["truncated"] is False
        assert [(c["label"], c["id"]) for c in body["cameras"]] == [("1", "1"), ("2", "2")]

    def test_truncated(self, client, session):
        """max_results is forwarded and truncation reported"""
        session.get.return_value = make_response(content=CAMERAS)

        body = client.get("/cameras", params={**BOX_PARAMS, "max_results": 1}).json()

        assert body["truncated"] is True
        assert [c["name"] for c in body["cameras"]] == ["Near"]

    def test_upstream_failure(self, client, session):
        """Failed statuses are returned with the upstream code and message"""
        session.get.return_value = make_response(status_code=403, reason="Forbidden")

        r = client.get("/cameras", params=BOX_PARAMS)

        assert r.status_code == 403
        assert r.json()["message"] == MSG_FORBIDDEN
        assert r.json()["success"] is False

    def test_transport_failure(self, client, session):
        """Transport faults become 502"""
        session.get.side_effect = requests.ConnectionError("down")

        r = client.get("/cameras", params=BOX_PARAMS)

        assert r.status_code == 502
        assert r.json()["error"] == "tomtom_transport"

    def test_undecodable_success_is_bad_gateway(self, client, session):
        """A 2xx body that fails to parse is reported as 502, not 200"""
        session.get.return_value = make_response(content=b"<html>oops</html>", content_type="text/xml")

        r = client.get("/cameras", params=BOX_PARAMS)

        assert r.status_code == 502
        assert r.json()["error"] == "tomtom_failed"
        assert r.json()["success"] is False
        assert r.json()["message"].startswith("Unable to deserialize response")

    def test_negative_max_results_rejected(self, client):
        """max_results must be >= 0"""
        r = client.get("/cameras", params={**BOX_PARAMS, "max_results": -1})
        assert r.status_code == 422


class TestCameraImageEndpoint:
    """Test cases for /cameras/{id}/image"""

    def test_image_png(self, client, api, session):
        """Snapshot is re-encoded as PNG and attached to the listed camera"""
        session.get.return_value = make_response(content=CAMERAS)
        client.get("/cameras", params=BOX_PARAMS)
        session.get.return_value = make_response(content=make_jpeg(), content_type=None)

        r = client.get("/cameras/1/image")

        assert r.status_code == 200
        assert r.headers["content-type"] == "image/png"
        assert r.headers["x-last-refresh"].endswith("Z")
        assert Image.open(io.BytesIO(r.content)).size == (8, 6)
        near = next(c for c in api.cameras if c.camera_id == 1)
        assert near.image is not None
        assert near.last_refresh is not None

    def test_placeholder_on_404(self, client, session):
        """Unknown camera still answers 200 with a placeholder"""
        session.get.return_value = make_response(status_code=404, reason="Not Found")

        r = client.get("/cameras/777/image")

        assert r.status_code == 200
        assert Image.open(io.BytesIO(r.content)).size == (320, 240)
