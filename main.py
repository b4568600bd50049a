"""
Texture Gateway - Main entry point.

Serves the gateway (resource proxy + texture persistence) for an in-browser
texture browser, and provides command line helpers that use the same client
code as the browser:

  python main.py server            Run the gateway server
  python main.py crawl --kind map  Print the catalog of the configured browse root as JSON
  python main.py check             Exit 0 if the gateway answers /check
"""

import json
import sys
from typing import Callable, Dict

import click

from utils.Args import Args
from utils.Errors import GatewayError, record_crash
from utils.Logger import Logger


def setup() -> None:
    """
    Initialize the application: configuration and logging.

    Note: Args must be initialized before Logger since Logger configuration
    comes from Args. Args uses print() for warnings, not Logger, so this order is safe.
    """
    Args.initialize()

    log_level = Args.log_level
    Logger.initialize(log_level=log_level, log_file=Args.log_file, log_color=Args.log_color)

    Logger.debug(f"Python version: {sys.version}")
    if Args.config_file:
        Logger.info(f"Using config file: {Args.config_file}")
    Logger.debug(f"Log level: {log_level}")


def _run_server() -> None:
    from asset_server.app import app

    Logger.info(f"Texture gateway listening on http://{Args.host}:{Args.port}")
    app.run(host=Args.host, port=Args.port, debug=False, threaded=True)


def _run_crawl() -> None:
    """Crawl the configured browse root through a running gateway and print the catalog."""
    from asset_browser.BrowseSession import BrowseSession

    with BrowseSession.from_args(material={}) as session:
        try:
            catalog = session.open()
        except (GatewayError, ValueError) as e:
            record_crash(f"Crawl failed: {e}")
        print(json.dumps({"browse_root": catalog.browse_root, "folders": catalog.to_dict()}, indent=2))


def _run_check() -> None:
    from asset_browser.GatewayClient import GatewayClient

    client = GatewayClient.from_args()
    if not client.check():
        record_crash(f"Gateway not reachable at {client.base_url}")
    Logger.info(f"Gateway OK at {client.base_url}")


def _noop_run() -> None:
    """No-op module: used for tests and entrypoints that only need Args and Logger."""
    pass


MODULES: Dict[str, Callable[[], None]] = {
    "server": _run_server,
    "crawl": _run_crawl,
    "check": _run_check,
    "noop": _noop_run,
}


def run_module(module: str) -> None:
    """
    Run the named module.

    Raises:
        ValueError: If module is not in MODULES.
    """
    run = MODULES.get(module)
    if run is None:
        raise ValueError(f"Unknown module {module!r}. Valid: {', '.join(MODULES)}")
    run()


def main() -> None:
    """Main entry point for the Texture Gateway application."""
    setup()
    run_module(Args.module)


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise  # Preserve exit code from --help etc.
    except click.ClickException as e:
        print(e.format_message(), file=sys.stderr)
        sys.exit(e.exit_code)
    except RuntimeError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
