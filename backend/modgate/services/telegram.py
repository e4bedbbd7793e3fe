"""Thin async client for the three Bot API calls the gateway needs.

Error messages never include request URLs: the bot token is part of every
Bot API path.
"""
from __future__ import annotations
from typing import Any
import httpx


class TelegramError(Exception):
    def __init__(self, description: str, status_code: int | None = None):
        super().__init__(description)
        self.description = description
        self.status_code = status_code  # None when the request never got an answer


def build_http_client(base_url: str, timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, timeout=timeout)


class TelegramClient:
    def __init__(self, token: str, http: httpx.AsyncClient):
        self._token = token
        self._http = http

    async def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            r = await self._http.post(f"/bot{self._token}/{method}", json=payload)
        except httpx.HTTPError as e:
            raise TelegramError(f"{method}: {type(e).__name__}") from None
        try:
            body = r.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if r.is_error or not body.get("ok"):
            description = body.get("description") or r.reason_phrase or "request failed"
            raise TelegramError(f"{method}: {description}", status_code=r.status_code)
        return body.get("result") or {}

    async def get_file_path(self, file_id: str) -> str:
        """Exchange a file_id for a download path. Paths expire (about an hour)."""
        result = await self._call("getFile", {"file_id": file_id})
        file_path = result.get("file_path")
        if not file_path:
            # files over the download limit come back without a path
            raise TelegramError("getFile: no file_path in result", status_code=404)
        return file_path

    async def open_file(self, file_path: str) -> httpx.Response:
        """Start streaming a file. The caller owns the response and must aclose() it."""
        request = self._http.build_request("GET", f"/file/bot{self._token}/{file_path}")
        try:
            response = await self._http.send(request, stream=True)
        except httpx.HTTPError as e:
            raise TelegramError(f"file download: {type(e).__name__}") from None
        if response.is_error:
            await response.aclose()
            raise TelegramError(f"file download: {response.reason_phrase}", status_code=response.status_code)
        return response

    async def send_photo(self, chat_id: str, photo: str, caption: str) -> dict[str, Any]:
        return await self._call("sendPhoto", {"chat_id": chat_id, "photo": photo, "caption": caption})
