from __future__ import annotations

import threading
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from hub_engine.tools.direct_fetch import DirectFetch
from hub_engine.tools.fetch_provider import build_fetch_provider
from hub_engine.tools.hasdata_scraper import HASDATA_BASE_URL, HasdataScraper
from hub_engine.tools.jina_reader import JinaReader
from hub_engine.tools.web_utils import html_to_text

ARTICLE_HTML = """
<html>
  <head><style>p { color: red; }</style><script>var x = 1;</script></head>
  <body>
    <nav><p>Home | Teams | Scores</p></nav>
    <h1>Transfer portal</h1>
    <p>Athletes may enter the   portal during
       designated windows.</p>
    <p>Graduate transfers are exempt.</p>
    <footer><p>Copyright</p></footer>
  </body>
</html>
"""


class FakeResponse:
    def __init__(self, *, text: str = "", payload=None, headers=None):
        self.text = text
        self._payload = payload
        self.headers = headers or {}

    def raise_for_status(self):
        return None

    def json(self):
        return self._payload


class FakeClient:
    def __init__(self, response: FakeResponse):
        self.response = response
        self.calls: list[tuple[str, dict]] = []

    async def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


def test_html_to_text_keeps_paragraphs_and_drops_boilerplate():
    text = html_to_text(ARTICLE_HTML)
    assert text == "Athletes may enter the portal during designated windows.\nGraduate transfers are exempt."


def test_html_to_text_falls_back_to_body_text():
    assert html_to_text("<html><body><div>Only a div</div></body></html>") == "Only a div"
    assert html_to_text("") == ""


@pytest.mark.asyncio
async def test_direct_fetch_sends_browser_user_agent_and_extracts_text():
    client = FakeClient(FakeResponse(text=ARTICLE_HTML, headers={"content-type": "text/html; charset=utf-8"}))
    provider = DirectFetch(client, user_agent="Mozilla/5.0 test")

    document = await provider.fetch("https://ncaa.org/rules")

    assert document.url == "https://ncaa.org/rules"
    assert document.content.startswith("Athletes may enter the portal")
    url, kwargs = client.calls[0]
    assert url == "https://ncaa.org/rules"
    assert kwargs["headers"]["User-Agent"] == "Mozilla/5.0 test"
    assert kwargs["follow_redirects"] is True


@pytest.mark.asyncio
async def test_direct_fetch_rejects_binary_content():
    client = FakeClient(FakeResponse(text="%PDF", headers={"content-type": "application/pdf"}))
    with pytest.raises(ValueError):
        await DirectFetch(client, user_agent="ua").fetch("https://a.com/file.pdf")


@pytest.mark.asyncio
async def test_jina_reader_prefixes_target_url_and_sends_key():
    client = FakeClient(FakeResponse(text="  Page text  "))
    provider = JinaReader(client, api_key="jina-key")

    document = await provider.fetch("https://example.com/a")

    assert document.content == "Page text"
    url, kwargs = client.calls[0]
    assert url == "https://r.jina.ai/https://example.com/a"
    assert kwargs["headers"]["Authorization"] == "Bearer jina-key"


def test_jina_reader_supports_url_template():
    provider = JinaReader(FakeClient(FakeResponse()), base_url="http://reader.local/read?u={url}")
    assert provider.reader_url("https://a.com") == "http://reader.local/read?u=https://a.com"


@pytest.mark.asyncio
async def test_jina_reader_empty_body_is_an_error():
    with pytest.raises(RuntimeError):
        await JinaReader(FakeClient(FakeResponse(text="   "))).fetch("https://a.com")


@pytest.mark.asyncio
async def test_hasdata_prefers_text_then_reduces_html():
    client = FakeClient(FakeResponse(payload={"content": "<p>Scraped paragraph</p>"}))
    provider = HasdataScraper(client, api_key="hd")

    document = await provider.fetch("https://a.com")

    assert document.content == "Scraped paragraph"
    url, kwargs = client.calls[0]
    assert url == HASDATA_BASE_URL
    assert kwargs["params"] == {"url": "https://a.com", "js_rendering": "false"}


@pytest.mark.asyncio
async def test_hasdata_parses_html_off_the_event_loop():
    parse_threads: list[int] = []

    def record(html: str) -> str:
        parse_threads.append(threading.get_ident())
        return "parsed"

    provider = HasdataScraper(FakeClient(FakeResponse(payload={"content": "<p>x</p>"})), api_key="hd")
    with patch("hub_engine.tools.hasdata_scraper.html_to_text", side_effect=record):
        document = await provider.fetch("https://a.com")

    assert document.content == "parsed"
    assert parse_threads and parse_threads[0] != threading.get_ident()


@pytest.mark.asyncio
async def test_hasdata_requires_api_key():
    with pytest.raises(RuntimeError):
        await HasdataScraper(FakeClient(FakeResponse()), api_key="").fetch("https://a.com")


def _config(provider: str):
    return SimpleNamespace(
        fetch_provider=provider,
        fetch_user_agent="ua",
        fetch_max_body_chars=1000,
        jina_api_key="",
        jina_reader_base_url="https://r.jina.ai",
        hasdata_api_key="hd",
    )


@pytest.mark.parametrize(
    ("provider", "expected"),
    [("direct", DirectFetch), ("jina", JinaReader), ("jina_reader", JinaReader), ("HASDATA", HasdataScraper)],
)
def test_build_fetch_provider_selects_implementation(provider, expected):
    assert isinstance(build_fetch_provider(_config(provider), FakeClient(FakeResponse())), expected)


def test_build_fetch_provider_rejects_unknown_provider():
    with pytest.raises(ValueError):
        build_fetch_provider(_config("playwright"), FakeClient(FakeResponse()))
