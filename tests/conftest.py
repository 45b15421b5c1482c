import json
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Thread

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a scratch directory and clear any credentials or overrides."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    for name in ("API_KEY", "ENDPOINT", "DEFAULT_MODEL", "CHARACTER_LIMIT", "CONFIG_DIR"):
        monkeypatch.delenv(f"RAPIDLLM_{name}", raising=False)
    return home


@pytest.fixture
def prompts_root(isolated_home):
    root = isolated_home / ".config" / "rapidllm" / "prompts"
    root.mkdir(parents=True)
    return root


class ChatServer:
    """A local stand-in for the chat completions endpoint."""

    def __init__(self):
        self.status = 200
        self.body: bytes = json.dumps({"choices": [{"message": {"role": "assistant", "content": "ok"}}]}).encode()
        self.requests: list[dict] = []
        self.server = HTTPServer(("localhost", 0), self._handler())
        self.thread = Thread(target=self.server.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        return f"http://localhost:{self.server.server_address[1]}/api/v1/chat/completions"

    def respond(self, payload, status: int = 200):
        self.status = status
        self.body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()

    def _handler(self):
        chat_server = self

        class MockChatHandler(BaseHTTPRequestHandler):
            def do_POST(self):
                content_length = int(self.headers["Content-Length"])
                chat_server.requests.append(
                    {
                        "path": self.path,
                        "headers": dict(self.headers),
                        "json": json.loads(self.rfile.read(content_length)),
                    }
                )

                self.send_response(chat_server.status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(chat_server.body)))
                self.end_headers()
                self.wfile.write(chat_server.body)

            def log_message(self, format, *args):
                pass

        return MockChatHandler


@pytest.fixture
def chat_server(monkeypatch):
    try:
        server = ChatServer()
    except PermissionError as exc:
        pytest.skip(f"Local HTTP server unavailable in this environment: {exc}")
    server.thread.start()
    monkeypatch.setenv("RAPIDLLM_ENDPOINT", server.url)
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
    yield server
    server.server.shutdown()
    server.server.server_close()
