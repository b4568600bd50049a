"""
Flask app for the texture gateway server.

Routes:
- GET /check: liveness probe for the browser and the "check" module
- GET /proxy?url=...: server-side relay for listing pages and image bytes
- POST /download-texture: save a texture under the asset root

Settings (asset root, target folder, extension, timeouts) are read from Args
when the process has initialized it; see server_config.
"""

import logging
from typing import Any

from flask import Flask

from asset_server.server_config import get_max_content_length
from utils.Logger import Logger

if not getattr(Logger, "_initialized", False):
    Logger.initialize(log_level="WARNING", log_file=False)

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = get_max_content_length()  # large base64 data URIs

from asset_server.api_proxy import proxy_bp
from asset_server.api_save import save_bp

app.register_blueprint(proxy_bp)
app.register_blueprint(save_bp)


@app.route("/check", methods=["GET"])
def check() -> Any:
    """Liveness probe."""
    return {"status": "ok"}


class _QuietRequestLogFilter(logging.Filter):
    """Suppress Werkzeug request logs for the polling liveness probe."""

    _QUIET_PATHS = ("/check",)

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return not any(f"GET {path} " in msg for path in self._QUIET_PATHS)


logging.getLogger("werkzeug").addFilter(_QuietRequestLogFilter())
