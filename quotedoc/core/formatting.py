"""
Locale formatting helpers for the quote PDF.

All helpers are defensive: bad numbers become 0, bad dates become today.
"""
import re
import math
import unicodedata
from datetime import datetime

from .settings import get_locale

FILENAME_MAX = 30
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")
_ISO_DATE = re.compile(r"^(\d{4}-\d{2}-\d{2})(T.*)?$")


def to_number(value) -> float:
    """Coerce a cart value to float. None, bools, junk, NaN and inf → 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        try:
            num = float(str(value).strip())
        except ValueError:
            return 0.0
    if math.isnan(num) or math.isinf(num):
        return 0.0
    return num


def format_currency(value, locale: dict = None) -> str:
    """$1,234.56 / R$ 1.234,56"""
    loc = locale or get_locale()
    amount = round(to_number(value), 2)
    body = f"{abs(amount):,.2f}"
    # swap through a placeholder so "," and "." can trade places
    body = (body.replace(",", "\0")
                .replace(".", loc["decimal_sep"])
                .replace("\0", loc["thousands_sep"]))
    sym = loc["currency_symbol"] + (" " if loc["currency_space"] else "")
    sign = "-" if amount < 0 else ""
    return f"{sign}{sym}{body}"


def parse_client_date(raw, now: datetime = None) -> datetime:
    """
    ISO YYYY-MM-DD (optionally followed by a T time part) → that day at
    12:00, so no timezone shift can move it across midnight. Missing or
    unparsable → now.
    """
    m = _ISO_DATE.match(raw.strip()) if isinstance(raw, str) else None
    if m:
        try:
            d = datetime.strptime(m.group(1), "%Y-%m-%d")
            return d.replace(hour=12, minute=0, second=0, microsecond=0)
        except ValueError:
            pass
    return now or datetime.now()


def format_date(dt: datetime, locale: dict = None) -> str:
    """Short date; en-US is unpadded (3/5/2024), pt-BR padded (05/03/2024)."""
    loc = locale or get_locale()
    return loc["date_format"].format(day=dt.day, month=dt.month, year=dt.year)


def sanitize_filename_part(name, default: str) -> str:
    """
    ASCII-fold, collapse every run outside [A-Za-z0-9] to "_", cap at 30.
    Names with no letters or digits at all use the default.
    """
    text = name if isinstance(name, str) else ""
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    if not re.search(r"[A-Za-z0-9]", folded):
        folded = default
    return _NON_ALNUM.sub("_", folded)[:FILENAME_MAX]


def build_filename(client_name, locale: dict = None) -> str:
    """Quote_<client>.pdf"""
    loc = locale or get_locale()
    part = sanitize_filename_part(client_name, loc["file_client_default"])
    return f"{loc['file_prefix']}_{part}.pdf"
