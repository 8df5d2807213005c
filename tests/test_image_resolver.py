"""
Tests for quotedoc/core/image_resolver.py: URL gating, decode/re-encode,
scatter/gather, and the bounded wait.
"""
import io
import time
import threading

import pytest
import requests
from PIL import Image

from quotedoc.core import image_resolver
from quotedoc.core.image_resolver import (
    resolve_image, resolve_images, is_fetchable, _download as real_download,
)


def _decode(png: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(png))
    img.load()
    return img


# ═══════════════════════════════════════════════════════════════════════════════
# URL gating
# ═══════════════════════════════════════════════════════════════════════════════

class TestUrlGating:

    @pytest.mark.parametrize("url", [
        None, "", "   ", 42, ["https://x.com/a.png"],
        "ftp://example.com/a.png", "/static/a.png", "data:image/png;base64,AAAA",
        "www.example.com/a.png",
    ])
    def test_invalid_url_is_none_without_network(self, url, offline):
        assert resolve_image(url) is None
        assert offline == []

    def test_http_and_https_are_fetchable(self):
        assert is_fetchable("http://a.com/x.png")
        assert is_fetchable("HTTPS://A.COM/X.PNG")
        assert is_fetchable("  https://a.com/x.png  ")

    def test_invalid_job_keeps_its_key(self, offline):
        out = resolve_images({"a": "", "b": None})
        assert out == {"a": None, "b": None}
        assert offline == []


# ═══════════════════════════════════════════════════════════════════════════════
# Fetch + decode
# ═══════════════════════════════════════════════════════════════════════════════

class TestResolve:

    def test_png_roundtrips_as_png(self, fake_web, png_factory):
        fake_web["https://img.test/a.png"] = png_factory()
        out = resolve_image("https://img.test/a.png")
        assert out.startswith(b"\x89PNG")

    def test_jpeg_reencoded_at_natural_size(self, fake_web, png_factory):
        fake_web["https://img.test/a.jpg"] = png_factory(size=(16, 9), fmt="JPEG")
        out = resolve_image("https://img.test/a.jpg")
        img = _decode(out)
        assert img.format == "PNG"
        assert img.size == (16, 9)

    def test_palette_gif_converted(self, fake_web, png_factory):
        fake_web["https://img.test/a.gif"] = png_factory(fmt="GIF", mode="P", color=3)
        out = resolve_image("https://img.test/a.gif")
        assert _decode(out).mode == "RGBA"

    def test_garbage_bytes_is_none(self, fake_web):
        fake_web["https://img.test/broken.png"] = b"<html>not an image</html>"
        assert resolve_image("https://img.test/broken.png") is None

    def test_http_error_is_none(self, fake_web):
        assert resolve_image("https://img.test/missing.png") is None

    def test_network_error_is_none(self, offline):
        assert resolve_image("https://img.test/a.png") is None
        assert offline == ["https://img.test/a.png"]

    def test_shared_url_fetched_once(self, fake_web, png_factory, offline):
        fake_web["https://img.test/a.png"] = png_factory()
        out = resolve_images({1: "https://img.test/a.png", 2: "https://img.test/a.png"})
        assert out[1] and out[1] == out[2]
        assert offline == ["https://img.test/a.png"]

    def test_mixed_batch(self, fake_web, png_factory):
        fake_web["https://img.test/ok.png"] = png_factory()
        out = resolve_images({
            1: "https://img.test/ok.png",
            2: "https://img.test/missing.png",
            3: "nope",
        })
        assert set(out) == {1, 2, 3}
        assert out[1] is not None
        assert out[2] is None and out[3] is None


# ═══════════════════════════════════════════════════════════════════════════════
# Bounded wait
# ═══════════════════════════════════════════════════════════════════════════════

class TestTimeout:

    def test_hanging_host_gives_up_at_ceiling(self, monkeypatch, png_factory):
        release = threading.Event()

        def _hang(url, timeout):
            release.wait(10)
            return png_factory()

        monkeypatch.setattr(image_resolver, "_download", _hang)
        try:
            t0 = time.time()
            out = resolve_image("https://slow.test/a.png", timeout=0.3)
            elapsed = time.time() - t0
        finally:
            release.set()
        assert out is None
        assert elapsed < 2.0

    def test_slow_host_does_not_block_fast_one(self, monkeypatch, png_factory):
        release = threading.Event()
        fast = png_factory()

        def _download(url, timeout):
            if "slow" in url:
                release.wait(10)
            return fast

        monkeypatch.setattr(image_resolver, "_download", _download)
        try:
            out = resolve_images({"s": "https://slow.test/a.png",
                                  "f": "https://fast.test/a.png"}, timeout=0.3)
        finally:
            release.set()
        assert out["s"] is None
        assert out["f"] is not None

    def test_default_ceiling_is_five_seconds(self, monkeypatch):
        seen = {}

        def _download(url, timeout):
            seen["timeout"] = timeout
            raise requests.ConnectionError("x")

        monkeypatch.setattr(image_resolver, "_download", _download)
        resolve_image("https://img.test/a.png")
        assert seen["timeout"] == 5.0

    def test_env_override(self, monkeypatch):
        seen = {}

        def _download(url, timeout):
            seen["timeout"] = timeout
            raise requests.ConnectionError("x")

        monkeypatch.setattr(image_resolver, "_download", _download)
        monkeypatch.setenv("QUOTEDOC_IMAGE_TIMEOUT", "2.5")
        resolve_image("https://img.test/a.png")
        assert seen["timeout"] == 2.5


# ═══════════════════════════════════════════════════════════════════════════════
# HTTP call shape
# ═══════════════════════════════════════════════════════════════════════════════

class _FakeResponse:
    def __init__(self, status=200, content=b""):
        self.status_code = status
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class TestDownload:

    def test_plain_get_without_credentials(self, monkeypatch):
        calls = []

        def _get(url, **kwargs):
            calls.append((url, kwargs))
            return _FakeResponse(content=b"abc")

        monkeypatch.setattr(image_resolver.requests, "get", _get)
        assert real_download("https://img.test/a.png", 5.0) == b"abc"
        url, kwargs = calls[0]
        assert url == "https://img.test/a.png"
        assert kwargs["timeout"] == 5.0
        assert "auth" not in kwargs and "headers" not in kwargs

    def test_error_status_raises(self, monkeypatch):
        monkeypatch.setattr(image_resolver.requests, "get",
                            lambda url, **kw: _FakeResponse(status=403))
        with pytest.raises(requests.HTTPError):
            real_download("https://img.test/a.png", 5.0)
