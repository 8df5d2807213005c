"""
image_resolver.py - Remote image URL → embeddable PNG bytes

Used by the quote PDF for product thumbnails and the header logo.

Contract:
  - resolve_image(url) returns PNG bytes or None. It never raises.
  - Non-string, empty, or non-http(s) URLs return None without touching
    the network.
  - The fetch is a plain credential-less GET (no auth, no custom headers).
    Whatever comes back is decoded with Pillow and re-encoded losslessly as
    PNG at its natural size, so reportlab always gets one known format.
  - A fixed ceiling (5s by default) races the fetch. When it expires we stop
    waiting and return None; the worker thread is left to finish on its own.
"""

import io
import logging
from concurrent.futures import ThreadPoolExecutor, wait

import requests
from PIL import Image

from .settings import image_timeout

log = logging.getLogger("quotedoc.images")


def is_fetchable(url) -> bool:
    """True for non-empty http:// or https:// strings."""
    return (isinstance(url, str)
            and url.strip().lower().startswith(("http://", "https://")))


def _download(url: str, timeout: float) -> bytes:
    resp = requests.get(url, timeout=timeout, allow_redirects=True)
    resp.raise_for_status()
    return resp.content


def _to_png(data: bytes) -> bytes:
    """Decode any Pillow-readable image and re-encode it as PNG."""
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        frame = img if img.mode in ("RGB", "RGBA", "L", "LA") else img.convert("RGBA")
        out = io.BytesIO()
        frame.save(out, format="PNG")
    return out.getvalue()


def _fetch(url: str, timeout: float):
    """Worker body. Every failure collapses to None."""
    try:
        data = _download(url.strip(), timeout)
    except Exception as e:
        log.warning("Image unavailable (%s): %s", url, e, extra={"url": url})
        return None
    try:
        return _to_png(data)
    except Exception as e:
        log.warning("Image could not be decoded (%s): %s", url, e, extra={"url": url})
        return None


def resolve_images(jobs: dict, timeout: float = None) -> dict:
    """
    Scatter/gather: fetch every URL in jobs concurrently and wait for all of
    them to settle, bounded by one shared deadline.

    Args:
        jobs: {key: url}. Keys are opaque (item ids, "logo", ...).
        timeout: seconds; defaults to QUOTEDOC_IMAGE_TIMEOUT / 5s.

    Returns:
        {key: png_bytes or None} with exactly the keys of jobs.
    """
    timeout = image_timeout() if timeout is None else timeout
    results = {key: None for key in jobs}
    pending = {key: url.strip() for key, url in jobs.items() if is_fetchable(url)}
    if not pending:
        return results

    # one task per distinct URL; items sharing a picture share the fetch
    urls = sorted(set(pending.values()))
    pool = ThreadPoolExecutor(max_workers=len(urls), thread_name_prefix="quotedoc-img")
    try:
        futures = {url: pool.submit(_fetch, url, timeout) for url in urls}
        done, not_done = wait(list(futures.values()), timeout=timeout)
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    for url, fut in futures.items():
        if fut in not_done:
            log.warning("Image timed out after %.1fs: %s", timeout, url, extra={"url": url})

    for key, url in pending.items():
        fut = futures[url]
        results[key] = fut.result() if fut in done else None

    ok = sum(1 for v in results.values() if v)
    log.debug("Resolved %d/%d images", ok, len(results))
    return results


def resolve_image(url, timeout: float = None):
    """Single URL → PNG bytes or None."""
    return resolve_images({0: url}, timeout=timeout)[0]
