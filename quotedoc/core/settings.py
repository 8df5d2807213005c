"""
Export settings: brand, locale tables, and env overrides.

Environment:
    QUOTEDOC_LOCALE          en-US (default) or pt-BR
    QUOTEDOC_IMAGE_TIMEOUT   seconds to wait for remote images (default 5)
    QUOTEDOC_LOGO_URL        branding image drawn in the header
"""
import os
import logging

log = logging.getLogger("quotedoc.settings")

# ═══════════════════════════════════════════════════════════════════════════════
# BRAND
# ═══════════════════════════════════════════════════════════════════════════════
BRAND = {
    "name":     "Art Brasil Imagens",
    "logo_url": "https://i.postimg.cc/dts7TZmg/ARTBRASIL.png",
    "author":   "Art Brasil",
}

IMAGE_TIMEOUT = 5.0

# ═══════════════════════════════════════════════════════════════════════════════
# LOCALES - number/date formats and every user-visible string
# The document and filename placeholders for a missing client name are
# deliberately separate keys.
# ═══════════════════════════════════════════════════════════════════════════════
LOCALES = {
    "en-US": {
        "currency_symbol":   "$",
        "currency_space":    False,
        "thousands_sep":     ",",
        "decimal_sep":       ".",
        "date_format":       "{month}/{day}/{year}",
        "title":             "QUOTE",
        "issued":            "Issued: {date}",
        "client_heading":    "CLIENT DETAILS:",
        "client_default":    "Final Customer",
        "contact":           "Contact: {phone}",
        "product_default":   "Product",
        "size_suffix":       "cm",
        "columns":           ["PHOTO", "PRODUCT", "SIZE", "QTY", "UNIT PRICE", "TOTAL"],
        "total_label":       "TOTAL:",
        "tagline":           "Art Brasil Imagens - Devotion in every detail.",
        "validity":          "Prices subject to change without notice. Quote valid for 15 days.",
        "file_prefix":       "Quote",
        "file_client_default": "Client",
        "empty_quote":       "Add items to the quote before exporting.",
        "export_failed":     "Could not generate the PDF. Check your connection and the image links.",
        "export_busy":       "An export is already in progress.",
    },
    "pt-BR": {
        "currency_symbol":   "R$",
        "currency_space":    True,
        "thousands_sep":     ".",
        "decimal_sep":       ",",
        "date_format":       "{day:02d}/{month:02d}/{year}",
        "title":             "ORÇAMENTO",
        "issued":            "Emissão: {date}",
        "client_heading":    "DADOS DO CLIENTE:",
        "client_default":    "Consumidor Final",
        "contact":           "Contato: {phone}",
        "product_default":   "Produto",
        "size_suffix":       "cm",
        "columns":           ["FOTO", "PRODUTO", "TAM.", "QTD", "VALOR UN.", "TOTAL"],
        "total_label":       "VALOR TOTAL:",
        "tagline":           "Art Brasil Imagens - Devoção em cada detalhe.",
        "validity":          "Preços sujeitos a alteração sem aviso prévio. Orçamento válido por 15 dias.",
        "file_prefix":       "Orcamento",
        "file_client_default": "Cliente",
        "empty_quote":       "Adicione itens ao orçamento antes de exportar.",
        "export_failed":     "Erro ao gerar o PDF. Verifique sua conexão e os links das imagens.",
        "export_busy":       "Já existe uma exportação em andamento.",
    },
}

DEFAULT_LOCALE = "en-US"


def get_locale(name: str = None) -> dict:
    """Locale table by name; falls back to QUOTEDOC_LOCALE, then en-US."""
    name = name or os.environ.get("QUOTEDOC_LOCALE", DEFAULT_LOCALE)
    if not isinstance(name, str) or name not in LOCALES:
        log.warning("Unknown locale %r, using %s", name, DEFAULT_LOCALE)
        name = DEFAULT_LOCALE
    return LOCALES[name]


def image_timeout() -> float:
    raw = os.environ.get("QUOTEDOC_IMAGE_TIMEOUT", "")
    if not raw:
        return IMAGE_TIMEOUT
    try:
        val = float(raw)
    except ValueError:
        log.warning("Bad QUOTEDOC_IMAGE_TIMEOUT=%r, using %.1fs", raw, IMAGE_TIMEOUT)
        return IMAGE_TIMEOUT
    return val if val > 0 else IMAGE_TIMEOUT


def logo_url() -> str:
    return os.environ.get("QUOTEDOC_LOGO_URL", BRAND["logo_url"])
