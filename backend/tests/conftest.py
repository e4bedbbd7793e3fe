from __future__ import annotations
import json
import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from modgate.config import Settings
from modgate.main import create_app

BOT_TOKEN = "123456:test-bot-token"
API_KEY = "bot-shared-secret"
CHANNEL = "-1001234567890"


class FakeTelegram:
    """Stands in for api.telegram.org behind an httpx.MockTransport."""

    def __init__(self):
        self.files: dict[str, tuple[str, str, bytes]] = {}
        self.get_file_calls: list[str] = []
        self.sent: list[dict] = []
        self.send_status = 200
        self.get_file_status: int | None = None
        self.download_status: int | None = None
        self._n = 0

    def add_file(self, file_id: str, content: bytes, content_type: str = "image/jpeg") -> None:
        self.files[file_id] = (self._next_path(), content_type, content)

    def rotate_path(self, file_id: str) -> None:
        # Telegram hands out a new path once the old one expires
        _, ct, content = self.files[file_id]
        self.files[file_id] = (self._next_path(), ct, content)

    def _next_path(self) -> str:
        self._n += 1
        return f"photos/file_{self._n}.jpg"

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == f"/bot{BOT_TOKEN}/getFile":
            file_id = json.loads(request.content)["file_id"]
            self.get_file_calls.append(file_id)
            if self.get_file_status is not None:
                return httpx.Response(self.get_file_status, json={"ok": False, "error_code": self.get_file_status, "description": "Internal Server Error"})
            if file_id not in self.files:
                return httpx.Response(400, json={"ok": False, "error_code": 400, "description": "Bad Request: invalid file_id"})
            file_path = self.files[file_id][0]
            return httpx.Response(200, json={"ok": True, "result": {"file_id": file_id, "file_size": 3, "file_path": file_path}})
        if path == f"/bot{BOT_TOKEN}/sendPhoto":
            payload = json.loads(request.content)
            if self.send_status != 200:
                return httpx.Response(self.send_status, json={"ok": False, "error_code": self.send_status, "description": "Bad Request: chat not found"})
            self.sent.append(payload)
            return httpx.Response(200, json={"ok": True, "result": {"message_id": len(self.sent)}})
        prefix = f"/file/bot{BOT_TOKEN}/"
        if path.startswith(prefix):
            if self.download_status is not None:
                return httpx.Response(self.download_status, content=b"")
            wanted = path[len(prefix):]
            for file_path, ct, content in self.files.values():
                if file_path == wanted:
                    return httpx.Response(200, content=content, headers={"content-type": ct})
            return httpx.Response(404, content=b"")
        return httpx.Response(404, json={"ok": False, "error_code": 404, "description": "Not Found"})


def make_settings(db_path, **overrides) -> Settings:
    values = dict(
        environment="test",
        web_api_key=API_KEY,
        telegram_bot_token=BOT_TOKEN,
        channel_chat_id=CHANNEL,
        database_url=f"sqlite+aiosqlite:///{db_path}",
        api_prefix="",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def telegram() -> FakeTelegram:
    return FakeTelegram()


@pytest_asyncio.fixture
async def app(tmp_path, telegram):
    http = httpx.AsyncClient(transport=httpx.MockTransport(telegram), base_url="https://api.telegram.org")
    application = create_app(make_settings(tmp_path / "gateway.db"), http_client=http)
    await application.state.gateway.store.create_schema()
    try:
        yield application
    finally:
        await http.aclose()
        await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth() -> dict[str, str]:
    return {"Authorization": f"Bearer {API_KEY}"}


@pytest.fixture
def listing():
    def _make(**overrides) -> dict:
        body = {
            "user_id": 42,
            "user_name": "alice",
            "server": "EU1",
            "car": "Sedan",
            "price": 5000,
            "photo_reference": "abc123",
        }
        body.update(overrides)
        return body
    return _make
