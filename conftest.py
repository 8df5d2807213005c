"""
Shared pytest fixtures for the quotedoc test suite.

IMPORTANT: the network is blocked for every test. image_resolver._download is
replaced by a stub that records the URL and fails, so the brand logo and any
thumbnail resolve to None unless a test installs fake_web.
"""
import io
import os
import sys

import pytest
import requests
from PIL import Image

_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)


# ── Temp data directory (per-test isolation) ──────────────────────────────────

@pytest.fixture(autouse=True)
def temp_data_dir(tmp_path, monkeypatch):
    """Redirect output/log dirs to an isolated tmp directory."""
    from quotedoc.core import paths
    data = tmp_path / "data"
    monkeypatch.setattr(paths, "DATA_DIR", str(data))
    monkeypatch.setattr(paths, "OUTPUT_DIR", str(data / "output"))
    monkeypatch.setattr(paths, "LOG_DIR", str(data / "logs"))
    for var in ("QUOTEDOC_LOCALE", "QUOTEDOC_IMAGE_TIMEOUT", "QUOTEDOC_LOGO_URL"):
        monkeypatch.delenv(var, raising=False)
    return str(data)


# ── Network ───────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def offline(monkeypatch):
    """Every download fails. Returns the list of URLs that were attempted."""
    from quotedoc.core import image_resolver
    calls = []

    def _no_network(url, timeout):
        calls.append(url)
        raise requests.ConnectionError(f"network disabled in tests: {url}")

    monkeypatch.setattr(image_resolver, "_download", _no_network)
    return calls


@pytest.fixture
def fake_web(monkeypatch, offline):
    """
    Serve {url: bytes}. Unknown URLs fail like a 404.
    Attempted URLs are still recorded in offline.
    """
    from quotedoc.core import image_resolver
    pages = {}

    def _download(url, timeout):
        offline.append(url)
        if url not in pages:
            raise requests.HTTPError(f"404 Client Error: Not Found for url: {url}")
        return pages[url]

    monkeypatch.setattr(image_resolver, "_download", _download)
    return pages


@pytest.fixture
def png_factory():
    """png_factory(color=(r, g, b), size=(w, h), fmt="PNG", mode="RGB") -> bytes"""
    def _make(color=(200, 30, 30), size=(8, 8), fmt="PNG", mode="RGB"):
        buf = io.BytesIO()
        Image.new(mode, size, color).save(buf, format=fmt)
        return buf.getvalue()
    return _make


# ── Cart data ─────────────────────────────────────────────────────────────────

@pytest.fixture
def sample_items():
    return [
        {"id": 1, "nome": "Nossa Senhora Aparecida", "cm": "30", "valor": 150.0,
         "imagem": "https://img.example.com/aparecida.jpg", "quantity": 2, "total": 300.0},
        {"id": 2, "nome": "São Jorge", "cm": "40", "valor": 220.5,
         "imagem": "", "quantity": 1, "total": 220.5},
        {"id": 3, "nome": "Sagrado Coração", "cm": "20", "valor": 89.9,
         "quantity": 3, "total": 269.7},
    ]


@pytest.fixture
def client_info():
    return {"name": "João 99% Ltda!", "phone": "(11) 99999-0000", "date": "2024-03-05"}
