"""
Quote PDF Generator
===================
Turns the cart (line items + client info) into the one-layout A4 quote PDF.

Flow:
  1. Sanitize items (copy, drop non-dicts). Nothing left → EmptyQuoteError,
     before any network or drawing work.
  2. Sum item totals (bad values count as 0).
  3. Fetch every thumbnail plus the brand logo concurrently; failures are
     just missing pictures.
  4. Header, client block, item table with thumbnails painted by a cell
     hook, total box + footer notes (moved to a new page when it won't fit).
  5. Return the bytes + filename, or save them under OUTPUT_DIR.

Positions below are millimetres from the top-left corner, converted with Y().
"""

import io
import os
import sys
import json
import time
import logging
from datetime import datetime

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..core import paths
from ..core.exceptions import EmptyQuoteError
from ..core.formatting import (to_number, format_currency, parse_client_date,
                               format_date, build_filename)
from ..core.image_resolver import resolve_images
from ..core.settings import BRAND, get_locale, logo_url
from .table_layout import draw_table

log = logging.getLogger("quotedoc.pdf")

# ═══════════════════════════════════════════════════════════════════════════════
# COLORS
# ═══════════════════════════════════════════════════════════════════════════════
INK       = HexColor("#1E293B")
MUTED     = HexColor("#64748B")
SUBTLE    = HexColor("#475569")
FAINT     = HexColor("#94A3B8")
DIVIDER   = HexColor("#F1F5F9")
BOX_FILL  = HexColor("#F8FAFC")
ACCENT    = HexColor("#4F46E5")

# ═══════════════════════════════════════════════════════════════════════════════
# LAYOUT (mm)
# ═══════════════════════════════════════════════════════════════════════════════
MARGIN_X      = 15
RIGHT_X       = 195
CENTER_X      = 105
TABLE_TOP     = 65
TOP_MARGIN    = 20
ROW_HEIGHT    = 22
THUMB_SIZE    = 18
FOOTER_GAP    = 10
FOOTER_HEIGHT = 40

_LOGO = ("brand", "logo")


# ═══════════════════════════════════════════════════════════════════════════════
# INPUT HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def _field(item: dict, key: str, alias: str):
    """Read key, falling back to the Portuguese cart field name."""
    val = item.get(key)
    return item.get(alias) if val is None else val


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def _item_key(item: dict):
    """Item id usable as an image cache key, or None."""
    key = item.get("id")
    if isinstance(key, bool) or not isinstance(key, (int, float, str)):
        return None
    if isinstance(key, str) and not key.strip():
        return None
    return key


def _quantity(item: dict):
    q = to_number(item.get("quantity"))
    return int(q) if q.is_integer() else q


def sanitize_items(items) -> list:
    """Shallow copies of the dict entries; the caller's list is never touched."""
    try:
        seq = list(items or [])
    except TypeError:
        return []
    return [dict(it) for it in seq if isinstance(it, dict)]


def quote_total(items: list) -> float:
    return round(sum(to_number(it.get("total")) for it in items), 2)


def place_footer(table_bottom: float, page_height: float):
    """
    Footer top (mm) below a table ending at table_bottom (mm).
    Returns (footer_y, new_page).
    """
    footer_y = table_bottom + FOOTER_GAP
    if footer_y + FOOTER_HEIGHT > page_height:
        return TOP_MARGIN, True
    return footer_y, False


def _image_jobs(items: list) -> dict:
    jobs = {}
    for it in items:
        key = _item_key(it)
        ref = _field(it, "image", "imagem")
        if key is not None and ref:
            jobs[key] = ref
    return jobs


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN PDF GENERATOR
# ═══════════════════════════════════════════════════════════════════════════════

def compose_quote(items, client: dict = None, locale=None, resolver=None,
                  now: datetime = None) -> dict:
    """
    Render the quote PDF in memory.

    items:  [{id, name|nome, size|cm, unit_price|valor, image|imagem, quantity, total}]
    client: {name?, phone?, date? (YYYY-MM-DD)}
    locale: locale name or table (see settings.LOCALES)
    resolver: callable({key: url}) -> {key: png|None}; defaults to resolve_images

    Raises EmptyQuoteError when no usable item is left; reportlab errors
    propagate.
    """
    t0 = time.time()
    loc = locale if isinstance(locale, dict) else get_locale(locale)
    client = client if isinstance(client, dict) else {}

    valid = sanitize_items(items)
    if not valid:
        log.warning("Export aborted: no usable items")
        raise EmptyQuoteError(loc["empty_quote"])

    resolver = resolver or resolve_images
    total = quote_total(valid)
    client_name = _text(client.get("name"))
    phone = _text(client.get("phone"))
    issued = format_date(parse_client_date(client.get("date"), now), loc)

    # ── Images: one concurrent batch, thumbnails + logo ──────────────────────
    jobs = _image_jobs(valid)
    resolved = resolver({**jobs, _LOGO: logo_url()})
    logo_png = resolved.get(_LOGO)
    image_cache = {key: resolved.get(key) for key in jobs}

    buf = io.BytesIO()
    W, H = A4
    c = canvas.Canvas(buf, pagesize=A4, invariant=1)
    c.setTitle(f"{loc['title']} {client_name or loc['client_default']}")
    c.setAuthor(BRAND["author"])

    def Y(top_mm):
        return H - top_mm * mm

    # ══════════════════════════════════════════════════════════════════════════
    # HEADER
    # ══════════════════════════════════════════════════════════════════════════
    logo_drawn = False
    if logo_png:
        try:
            c.drawImage(ImageReader(io.BytesIO(logo_png)), MARGIN_X * mm, Y(22),
                        width=35 * mm, height=12 * mm, mask="auto")
            logo_drawn = True
        except Exception as e:
            log.warning("Logo unavailable for the PDF: %s", e)

    c.setFont("Helvetica-Bold", 18)
    c.setFillColor(INK)
    c.drawRightString(RIGHT_X * mm, Y(20), loc["title"])

    c.setFont("Helvetica", 9)
    c.setFillColor(MUTED)
    c.drawRightString(RIGHT_X * mm, Y(26), loc["issued"].format(date=issued))

    # ── Divider + client block ───────────────────────────────────────────────
    c.setStrokeColor(DIVIDER)
    c.line(MARGIN_X * mm, Y(35), RIGHT_X * mm, Y(35))

    c.setFont("Helvetica", 9)
    c.setFillColor(MUTED)
    c.drawString(MARGIN_X * mm, Y(43), loc["client_heading"])

    c.setFont("Helvetica-Bold", 11)
    c.setFillColor(INK)
    c.drawString(MARGIN_X * mm, Y(49), client_name or loc["client_default"])

    if phone:
        c.setFont("Helvetica", 10)
        c.setFillColor(SUBTLE)
        c.drawString(MARGIN_X * mm, Y(55), loc["contact"].format(phone=phone))

    # ══════════════════════════════════════════════════════════════════════════
    # LINE ITEMS TABLE
    # ══════════════════════════════════════════════════════════════════════════
    labels = loc["columns"]
    columns = [
        {"label": labels[0], "width": 22 * mm, "align": "center"},
        {"label": labels[1], "width": None,    "align": "left"},
        {"label": labels[2], "width": 20 * mm, "align": "center"},
        {"label": labels[3], "width": 15 * mm, "align": "center"},
        {"label": labels[4], "width": 30 * mm, "align": "right"},
        {"label": labels[5], "width": 30 * mm, "align": "right"},
    ]
    rows = [[
        "",  # thumbnail painted by the hook
        _text(_field(it, "name", "nome")) or loc["product_default"],
        f"{_text(_field(it, 'size', 'cm')) or '0'} {loc['size_suffix']}",
        str(_quantity(it)),
        format_currency(_field(it, "unit_price", "valor"), loc),
        format_currency(it.get("total"), loc),
    ] for it in valid]

    thumbs = []

    def _paint_thumbnail(cell):
        if cell["section"] != "body" or cell["col"] != 0:
            return
        idx = cell["row"]
        if not 0 <= idx < len(valid):
            return
        key = _item_key(valid[idx])
        png = image_cache.get(key) if key is not None else None
        if not png:
            return
        size = THUMB_SIZE * mm
        x = cell["x"] + (cell["w"] - size) / 2
        y = cell["y"] + (cell["h"] - size) / 2
        try:
            c.drawImage(ImageReader(io.BytesIO(png)), x, y, width=size, height=size, mask="auto")
        except Exception as e:
            log.warning("Thumbnail for item %r could not be drawn: %s", key, e,
                        extra={"item": key})
            return
        thumbs.append(key)

    table = draw_table(
        c, columns, rows,
        start_y=TABLE_TOP * mm,
        page_size=A4,
        margin_left=MARGIN_X * mm,
        margin_right=(W / mm - RIGHT_X) * mm,
        top_margin=TOP_MARGIN * mm,
        row_height=ROW_HEIGHT * mm,
        did_draw_cell=_paint_thumbnail,
    )

    # ══════════════════════════════════════════════════════════════════════════
    # TOTAL + FOOTER
    # ══════════════════════════════════════════════════════════════════════════
    fy, new_page = place_footer(table["final_y"] / mm, H / mm)
    if new_page:
        c.showPage()

    c.setFillColor(BOX_FILL)
    c.roundRect(130 * mm, Y(fy + 15), 65 * mm, 15 * mm, 2 * mm, stroke=0, fill=1)

    c.setFont("Helvetica-Bold", 10)
    c.setFillColor(SUBTLE)
    c.drawString(135 * mm, Y(fy + 9), loc["total_label"])

    c.setFont("Helvetica-Bold", 14)
    c.setFillColor(ACCENT)
    c.drawRightString(190 * mm, Y(fy + 9), format_currency(total, loc))

    c.setFont("Helvetica-Oblique", 8)
    c.setFillColor(FAINT)
    c.drawCentredString(CENTER_X * mm, Y(fy + 30), loc["tagline"])
    c.drawCentredString(CENTER_X * mm, Y(fy + 34), loc["validity"])

    pages = c.getPageNumber()
    c.save()

    filename = build_filename(client_name, loc)
    result = {
        "ok": True,
        "filename": filename,
        "pdf": buf.getvalue(),
        "total": total,
        "items_count": len(valid),
        "pages": pages,
        "footer_new_page": new_page,
        "thumbnails": len(thumbs),
        "logo": logo_drawn,
        "date": issued,
    }
    duration_ms = round((time.time() - t0) * 1000, 1)
    log.info("Quote %s rendered: %s, %d items, %d page(s), %d/%d thumbnails (%.0fms)",
             filename, format_currency(total, loc), len(valid), pages,
             len(thumbs), len(jobs), duration_ms,
             extra={"total": total, "items": len(valid), "pages": pages,
                    "duration_ms": duration_ms})
    return result


def export_quote(items, client: dict = None, output_dir: str = None, **kwargs) -> dict:
    """compose_quote() + save the PDF under output_dir (default OUTPUT_DIR)."""
    result = compose_quote(items, client, **kwargs)
    out_dir = paths.ensure_dir(output_dir or paths.OUTPUT_DIR)
    path = os.path.join(out_dir, result["filename"])
    with open(path, "wb") as f:
        f.write(result["pdf"])
    result["path"] = path
    log.info("Quote saved → %s", path)
    return result


if __name__ == "__main__":
    from logging_config import setup_logging
    setup_logging()
    if len(sys.argv) < 2:
        print("usage: python -m quotedoc.forms.quote_pdf cart.json [output_dir]")
        sys.exit(2)
    with open(sys.argv[1]) as f:
        payload = json.load(f)
    if isinstance(payload, list):
        payload = {"items": payload}
    try:
        r = export_quote(payload.get("items"), payload.get("client"),
                         output_dir=sys.argv[2] if len(sys.argv) > 2 else None)
    except EmptyQuoteError as e:
        print(e.message)
        sys.exit(1)
    print(f"{r['path']}: {r['items_count']} items, {r['pages']} page(s), "
          f"{format_currency(r['total'])}")
