from __future__ import annotations
from dataclasses import dataclass
from typing import AsyncIterator
import httpx
import structlog
from modgate.errors import NotFoundError, UpstreamError
from modgate.services.telegram import TelegramClient, TelegramError

log = structlog.get_logger()

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Telegram answers 400 "Bad Request: invalid file_id" for unknown or expired ids
_GET_FILE_NOT_FOUND = {400, 404}
_DOWNLOAD_NOT_FOUND = {404}


@dataclass
class ResolvedPhoto:
    content_type: str
    response: httpx.Response

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.response.aiter_bytes():
                yield chunk
        finally:
            # also runs when the upstream read fails mid-body
            await self.response.aclose()

    async def aclose(self) -> None:
        await self.response.aclose()


def _map_error(e: TelegramError, not_found: set[int], reference: str) -> Exception:
    log.warning("photo_resolve_failed", photo_reference=reference, status=e.status_code, reason=e.description)
    if e.status_code in not_found:
        return NotFoundError("Photo not found or expired")
    return UpstreamError(e.description)


class PhotoResolver:
    """file_id -> fresh file_path -> byte stream.

    The path is looked up again on every call; a stored path goes stale.
    """

    def __init__(self, telegram: TelegramClient):
        self._telegram = telegram

    async def resolve(self, photo_reference: str) -> ResolvedPhoto:
        try:
            file_path = await self._telegram.get_file_path(photo_reference)
        except TelegramError as e:
            raise _map_error(e, _GET_FILE_NOT_FOUND, photo_reference) from None
        try:
            response = await self._telegram.open_file(file_path)
        except TelegramError as e:
            raise _map_error(e, _DOWNLOAD_NOT_FOUND, photo_reference) from None
        content_type = response.headers.get("content-type", DEFAULT_CONTENT_TYPE)
        return ResolvedPhoto(content_type=content_type, response=response)
