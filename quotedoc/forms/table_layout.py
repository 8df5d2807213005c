"""
Row table for reportlab canvases.

Fixed-height rows, header repeated on every page, striped body, and a
did_draw_cell hook so callers can paint into cells (thumbnails) after the
engine has laid them out.

Coordinates passed in and returned are top-origin points (distance from the
top edge of the page), the same convention as the quote header code. The
cell dicts handed to the hook are in reportlab's native bottom-left origin,
ready for c.drawImage().
"""
import logging

from reportlab.lib.colors import HexColor, white
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit

log = logging.getLogger("quotedoc.pdf")

HEAD_FILL = HexColor("#4F46E5")
HEAD_TEXT = white
BODY_TEXT = HexColor("#1E293B")
STRIPE    = HexColor("#F5F5F5")

FONT      = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


def column_widths(columns: list, table_width: float) -> list:
    """Fixed widths as given; columns with width=None split what is left."""
    fixed = sum(col["width"] for col in columns if col.get("width") is not None)
    autos = [col for col in columns if col.get("width") is None]
    remainder = table_width - fixed
    if autos and remainder <= 0:
        raise ValueError(f"No room for auto columns: fixed={fixed:.1f} > table={table_width:.1f}")
    share = remainder / len(autos) if autos else 0
    return [col["width"] if col.get("width") is not None else share for col in columns]


def _cell_text(c, text, x, w, y_bottom, h, align, font, size, pad):
    """Wrap text to the cell width and draw it vertically centred."""
    line_h = size * 1.15
    lines = simpleSplit(str(text), font, size, max(w - 2 * pad, 1)) or [""]
    max_lines = max(1, int((h - 2) // line_h))
    lines = lines[:max_lines]
    ty = y_bottom + (h + line_h * len(lines)) / 2 - size
    c.setFont(font, size)
    for ln in lines:
        if align == "right":
            c.drawRightString(x + w - pad, ty, ln)
        elif align == "center":
            c.drawCentredString(x + w / 2, ty, ln)
        else:
            c.drawString(x + pad, ty, ln)
        ty -= line_h


def draw_table(
    c,
    columns: list,
    rows: list,
    start_y: float,
    page_size=A4,
    margin_left: float = 15 * mm,
    margin_right: float = 15 * mm,
    top_margin: float = 20 * mm,
    bottom_margin: float = 15 * mm,
    header_height: float = 10 * mm,
    row_height: float = 22 * mm,
    font_size: float = 9,
    padding: float = 4 * mm,
    did_draw_cell=None,
) -> dict:
    """
    Draw a header row plus one fixed-height row per entry of rows.

    columns: [{"label": str, "width": points or None, "align": "left"|"center"|"right"}]
    rows:    [[cell text, ...], ...] in column order
    did_draw_cell(cell): called after every cell with
        {"section": "head"|"body", "row": i, "col": j, "x", "y", "w", "h"}

    Returns {"final_y": top-origin y under the last row, "pages": pages used,
             "rows": rows drawn}
    """
    W, H = page_size
    table_w = W - margin_left - margin_right
    widths = column_widths(columns, table_w)
    edges, x = [], margin_left
    for w in widths:
        edges.append(x)
        x += w

    def _emit(section, r, ci, x, y, w, h):
        if did_draw_cell is not None:
            did_draw_cell({"section": section, "row": r, "col": ci,
                           "x": x, "y": y, "w": w, "h": h})

    def _header(top):
        rl_y = H - top - header_height
        c.setFillColor(HEAD_FILL)
        c.rect(margin_left, rl_y, table_w, header_height, fill=1, stroke=0)
        for ci, col in enumerate(columns):
            c.setFillColor(HEAD_TEXT)
            _cell_text(c, col["label"], edges[ci], widths[ci], rl_y, header_height,
                       "center", FONT_BOLD, font_size, padding)
            _emit("head", 0, ci, edges[ci], rl_y, widths[ci], header_height)
        return top + header_height

    pages = 1
    cur_y = _header(start_y)

    for idx, row in enumerate(rows):
        # ── Page break: header repeats at the top margin ─────────────────────
        if cur_y + row_height > H - bottom_margin:
            c.showPage()
            pages += 1
            cur_y = _header(top_margin)

        rl_y = H - cur_y - row_height
        if idx % 2 == 1:
            c.setFillColor(STRIPE)
            c.rect(margin_left, rl_y, table_w, row_height, fill=1, stroke=0)

        for ci, col in enumerate(columns):
            text = row[ci] if ci < len(row) else ""
            c.setFillColor(BODY_TEXT)
            _cell_text(c, text, edges[ci], widths[ci], rl_y, row_height,
                       col.get("align", "left"), FONT, font_size, padding)
            _emit("body", idx, ci, edges[ci], rl_y, widths[ci], row_height)

        cur_y += row_height

    log.debug("Table: %d rows over %d page(s), final_y=%.1f", len(rows), pages, cur_y)
    return {"final_y": cur_y, "pages": pages, "rows": len(rows)}
