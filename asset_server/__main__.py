"""
Run the texture gateway server when the package is executed with -m.

  python -m asset_server [--host ...] [--port ...] [--asset-root ...] [--config ...]

Uses Args like main.py; host and port default to VITE_DEV_SERVER_IP and
VITE_TEXTURE_BROWSER_SERVER_PORT.
"""

import sys

# Args expects the module name as the first positional argument.
if len(sys.argv) < 2 or sys.argv[1] != "server":
    sys.argv = [sys.argv[0], "server"] + sys.argv[1:]

from utils.Args import Args
from utils.Logger import Logger

if not getattr(Args, "_initialized", False):
    Args.initialize()
    Logger.initialize(log_level=Args.log_level, log_file=Args.log_file, log_color=Args.log_color)

from asset_server.app import app

if __name__ == "__main__":
    Logger.info(f"Texture gateway listening on http://{Args.host}:{Args.port}")
    app.run(host=Args.host, port=Args.port, debug=False, threaded=True)
