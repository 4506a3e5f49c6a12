"""HTTP adapter that posts one group per multipart request."""
from __future__ import annotations

from contextlib import ExitStack
from typing import Any, Optional
import logging

import httpx

from ..config import UploadConfig
from ..errors import TransportError
from ..models import Group, UploadReceipt, group_size
logger = logging.getLogger(__name__)


class HTTPUploader:
    """
    HTTP client adapter for group uploads.

    Implements IUploader protocol. Every member file becomes one part of the
    multipart body under ``config.field_name``. No retries: a failed request
    fails its group.
    """

    def __init__(self, config: UploadConfig, client: Optional[httpx.AsyncClient] = None):
        self._config = config
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.timeout)
        return self

    async def __aexit__(self, *args):
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def send(self, group: Group) -> UploadReceipt:
        if not self._client:
            raise RuntimeError("HTTPUploader not initialized. Use 'async with' context.")

        logger.debug(
            f"POST {self._config.endpoint_url}: {len(group)} files, {group_size(group)} bytes"
        )

        with ExitStack() as stack:
            parts = []
            for file in group:
                if file.path is None:
                    raise TransportError(f"No local data for file {file.name!r}")
                try:
                    handle = stack.enter_context(open(file.path, "rb"))
                except OSError as exc:
                    raise TransportError(f"Cannot read {file.name!r}: {exc}") from exc
                parts.append((self._config.field_name, (file.name, handle, file.mime_type)))

            try:
                response = await self._client.post(self._config.endpoint_url, files=parts)
            except httpx.HTTPError as exc:
                raise TransportError(str(exc) or type(exc).__name__) from exc

        return self._parse_response(response)

    @staticmethod
    def _parse_response(response: httpx.Response) -> UploadReceipt:
        if not response.is_success:
            error_detail = response.text or response.reason_phrase
            raise TransportError(
                f"API failed with status {response.status_code}: {error_detail}",
                code=response.status_code,
            )

        try:
            data: Any = response.json()
        except ValueError as exc:
            raise TransportError(
                f"Invalid JSON response from server: {exc}", code=response.status_code
            ) from exc

        if not isinstance(data, dict):
            return UploadReceipt()

        objects = data.get("files") or ()
        return UploadReceipt(
            message=data.get("message"),
            objects=tuple(str(o) for o in objects) if isinstance(objects, list) else (),
        )
