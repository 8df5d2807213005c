#!/usr/bin/env python3
"""
quotedoc - Application Entry Point
Creates Flask app and registers the export Blueprint.
"""

import os
import logging
from flask import Flask


def create_app():
    """Application factory."""
    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "quotedoc-dev")

    from quotedoc.core.paths import validate_paths
    checks = validate_paths()
    if not checks["ok"]:
        logging.getLogger("quotedoc").error(
            "STARTUP: path checks FAILED - %s", "; ".join(checks["errors"]))

    from quotedoc.api.routes_export import bp
    app.register_blueprint(bp)
    return app


if __name__ == "__main__":
    from logging_config import setup_logging
    setup_logging()
    app = create_app()
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=False)
