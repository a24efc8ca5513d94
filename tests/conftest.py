from datetime import datetime, timezone

import pytest

from webserver.config import RenderMode, ServerConfig

INDEX_HTML = "Built on <cs371date>. Served by <cs371server>.\n"
LOGO_PNG = bytes(range(256)) * 4  # 1024 bytes, every byte value present
FIXED_NOW = datetime(2026, 10, 19, 14, 5, 9, tzinfo=timezone.utc)
FIXED_DATE = "Mon, 19 Oct 2026 14:05:09 GMT"


@pytest.fixture
def web_root(tmp_path):
    www = tmp_path / "www"
    www.mkdir()
    (www / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (www / "logo.png").write_bytes(LOGO_PNG)
    (www / "photo.jpg").write_bytes(b"\xff\xd8\xff\xe0 not really a jpeg")
    (www / "marked.html").write_text(
        "<html> <cs371begin> Hello from <cs371server>. Today is <cs371date> <cs371end> </html>\n",
        encoding="utf-8"
    )
    (www / "docs").mkdir()
    return tmp_path


@pytest.fixture
def config(web_root):
    return ServerConfig(host="127.0.0.1", port=0, web_root=str(web_root), request_timeout=2.0)


@pytest.fixture
def marked_config(web_root):
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        web_root=str(web_root),
        render_mode=RenderMode.MARKED_REGION,
        request_timeout=2.0
    )


def split_response(raw: bytes):
    head, body = raw.split(b"\r\n\r\n", 1)
    return head.decode("utf-8").split("\r\n"), body
