from __future__ import annotations

"""
Generic "GET and deserialize" helper shared by the TomTom wrappers.

Usage:
    class MyApi(ApiBase):
        async def thing(self, x):
            resp = await self.invoke(ThingModel, self.url("/thing/{0}?key={1}"), x, self._api_key)
            if resp.is_success_status_code:
                ...

Every HTTP outcome comes back as an ApiResponse; only transport faults
(DNS, refused connection, timeout) raise ApiTransportError.
"""

import asyncio
import io
import logging
import re
from http import HTTPStatus
from typing import Any, Callable, Optional, Type, TypeVar
from urllib.parse import quote

import requests
from PIL import Image

from common.types import ApiResponse
from tomtom.config import TomTomConfig


log = logging.getLogger(__name__)

# value of the `key` query parameter
_KEY_PARAM = re.compile(r"([?&]key=)[^&#]*")

T = TypeVar("T")

Deserializer = Callable[[requests.Response], Any]


class ApiTransportError(RuntimeError):
    """Request never produced an HTTP response."""


class Deserializers:
    """Explicit deserializers for responses whose Content-Type can't be trusted."""

    @staticmethod
    def xml(model: Type[T]) -> Callable[[requests.Response], T]:
        def _deserialize(response: requests.Response) -> T:
            return model.from_xml(response.content)  # type: ignore[attr-defined]
        return _deserialize

    @staticmethod
    def json(model: Type[T]) -> Callable[[requests.Response], T]:
        def _deserialize(response: requests.Response) -> T:
            return model.from_dict(response.json())  # type: ignore[attr-defined]
        return _deserialize

    @staticmethod
    def image(response: requests.Response) -> Image.Image:
        """Decode body bytes as an image regardless of headers."""
        img = Image.open(io.BytesIO(response.content))
        img.load()  # force decode now; Image.open is lazy
        return img


def _infer_deserializer(model: Optional[type], content_type: str) -> Optional[Deserializer]:
    ct = (content_type or "").split(";")[0].strip().lower()
    if ct.startswith("image/"):
        return Deserializers.image
    if model is None:
        return None
    if ct.endswith("xml"):
        return Deserializers.xml(model)
    if ct.endswith("json"):
        return Deserializers.json(model)
    return None


class ApiBase:
    def __init__(self, config: TomTomConfig, session: Optional[requests.Session] = None):
        """
        Params:
            config: explicit client configuration (API key, base URL, timeout)
            session: optional requests.Session for connection reuse
        """
        self._config = config
        self._api_key = config.api_key
        self.session = session or requests.Session()

    def url(self, path_template: str) -> str:
        """Prefix an endpoint path template with the configured base URL."""
        return f"{self._config.base_url}{path_template}"

    def _redact(self, url: str) -> str:
        return _KEY_PARAM.sub(r"\1***", url)

    async def invoke(
        self,
        model: Optional[Type[T]],
        url_template: str,
        *args: Any,
        deserializer: Optional[Deserializer] = None,
    ) -> ApiResponse[T]:
        """
        GET `url_template` formatted with URL-quoted `args` and deserialize the body.

        Deserialization is explicit when `deserializer` is given, otherwise picked
        from the response Content-Type (xml/json -> `model`, image/* -> PIL image).
        The blocking request runs on a worker thread so the caller's event loop
        keeps running while it waits.
        """
        url = url_template.format(*(quote(str(a), safe="") for a in args))
        log.debug("GET %s", self._redact(url))
        try:
            r = await asyncio.to_thread(self.session.get, url, timeout=self._config.timeout)
        except requests.RequestException as e:
            log.exception("Transport error calling %s", self._redact(url))
            raise ApiTransportError(str(e)) from e

        status = int(r.status_code)
        if not 200 <= status < 300:
            message = r.reason or _phrase(status)
            log.warning("API call failed: %s %s (%s)", status, message, self._redact(url))
            return ApiResponse(is_success_status_code=False, status_code=status, message=message)

        fn = deserializer or _infer_deserializer(model, r.headers.get("Content-Type", ""))
        if fn is None:
            message = f"Unable to deserialize response: unsupported content type {r.headers.get('Content-Type')!r}"
            log.warning(message)
            return ApiResponse(is_success_status_code=False, status_code=status, message=message)
        try:
            payload = fn(r)
        except Exception as e:
            log.warning("Deserialization failed for %s: %s", self._redact(url), e)
            return ApiResponse(
                is_success_status_code=False,
                status_code=status,
                message=f"Unable to deserialize response: {e}",
            )
        return ApiResponse(
            is_success_status_code=True,
            status_code=status,
            message=r.reason or _phrase(status),
            deserialized_response=payload,
        )


def _phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return f"HTTP {status}"
