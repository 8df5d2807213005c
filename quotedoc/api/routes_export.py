# routes_export.py - Quote PDF export endpoint
# The browser posts the current cart; the PDF comes back as a download.

import io
import time
import logging
import threading

from flask import Blueprint, request, jsonify, send_file

from ..core.exceptions import EmptyQuoteError
from ..core.settings import get_locale
from ..forms.quote_pdf import compose_quote

log = logging.getLogger("quotedoc.api")

bp = Blueprint("quotedoc", __name__)

# One export at a time; a second click while rendering gets 409.
_EXPORT_LOCK = threading.Lock()


@bp.after_request
def _log_request_end(response):
    if hasattr(request, "_start_time"):
        duration_ms = round((time.time() - request._start_time) * 1000, 1)
        if request.path != "/api/health":
            log.info("%s %s → %d (%.0fms)",
                     request.method, request.path, response.status_code, duration_ms,
                     extra={"route": request.path, "method": request.method,
                            "status": response.status_code, "duration_ms": duration_ms})
    return response


@bp.before_request
def _log_request_start():
    request._start_time = time.time()


@bp.route("/api/health")
def api_health():
    return jsonify({"ok": True})


@bp.route("/api/quote/export", methods=["POST"])
def api_quote_export():
    """Render {"items": [...], "client": {...}} as a PDF attachment."""
    payload = request.get_json(silent=True)
    if isinstance(payload, list):
        payload = {"items": payload}
    if not isinstance(payload, dict):
        payload = {}
    requested = request.args.get("locale") or payload.get("locale")
    loc = get_locale(requested if isinstance(requested, str) else None)

    if not _EXPORT_LOCK.acquire(blocking=False):
        return jsonify({"ok": False, "error": loc["export_busy"]}), 409
    try:
        result = compose_quote(payload.get("items"), payload.get("client"), locale=loc)
    except EmptyQuoteError as e:
        return jsonify({"ok": False, "error": e.message}), 400
    except Exception:
        log.exception("Quote export failed")
        return jsonify({"ok": False, "error": loc["export_failed"]}), 500
    finally:
        _EXPORT_LOCK.release()

    return send_file(io.BytesIO(result["pdf"]), mimetype="application/pdf",
                     as_attachment=True, download_name=result["filename"])
