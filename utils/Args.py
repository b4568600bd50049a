"""
Command line arguments and configuration with singleton pattern.

Provides a centralized configuration accessible via direct attribute access.
Supports command line arguments, environment variables (optionally from a
.env file) and config file values.

Config File Format:
    JSON format with simple key-value pairs.

    Example config.json:
    {
        "log_level": "DEBUG",
        "public_folder_name": "public",
        "target_folder": "textures",
        "file_extension": "webp",
        "texture_base_url": "https://textures.example.com/matcaps",
        "asset_kinds": {"matcap": {"uniform": "uMatcapMap"}}
    }

Example usage:
    from utils.Args import Args

    Args.initialize()

    host = Args.host  # From --host, VITE_DEV_SERVER_IP, config file, or defaults
    port = Args.port

Note: Priority order (highest to lowest):
    1. Command line arguments (from Typer)
    2. Environment variables (VITE_DEV_SERVER_IP, VITE_TEXTURE_BROWSER_SERVER_PORT,
       TEXTURE_GATEWAY_ASSET_ROOT)
    3. Config file values
    4. Default values (from defaults dict)
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from dotenv import load_dotenv

# Environment variable -> config key. Host and port are shared with the front-end dev server.
_ENV_KEYS: Dict[str, str] = {
    "VITE_DEV_SERVER_IP": "host",
    "VITE_TEXTURE_BROWSER_SERVER_PORT": "port",
    "TEXTURE_GATEWAY_ASSET_ROOT": "asset_root",
}


class ArgsMeta(type):
    """Metaclass to provide direct attribute access to config values."""

    def __getattr__(cls, name: str):
        """Provide attribute access to config values."""
        if not cls._initialized:
            raise RuntimeError("Args has not been initialized. Call Args.initialize() first.")

        if name in cls._config:
            return cls._config[name]

        raise AttributeError(f"Config item '{name}' not found")


class Args(metaclass=ArgsMeta):
    """Args class providing direct attribute access to configuration."""

    # Default values (lowest priority)
    _defaults: Dict[str, Any] = {
        "config_file": None,  # Set from --config when provided
        "module": "server",
        "log_level": "INFO",
        "log_color": False,
        "log_file": None,  # None = texture_gateway.log in cwd; False disables the file handler
        "host": "127.0.0.1",
        "port": 8081,
        "public_folder_name": "public",
        "asset_root": None,  # None = <project root>/<public_folder_name>
        "target_folder": "textures",
        "file_extension": "webp",
        "max_content_length": 5000 * 1024 * 1024,
        "proxy_timeout": 30,
        "cache_max_age": 31536000,  # One year
        "texture_base_url": None,  # Remote store root; kind browse_path is appended
        "browse_root": None,  # Explicit browse root; overrides texture_base_url + browse_path
        "asset_kind": "matcap",
        "uniform": None,  # Route loaded textures to this shader uniform instead of the kind's slot
        "asset_kinds": {},  # Per-kind overrides, validated in initialize()
        "browse_token": None,  # Optional ?token= appended to remote listing/asset URLs
        "is_production": False,  # True disables crawling in BrowseSession.open()
    }

    _config: Dict[str, Any] = {}
    _initialized: bool = False
    _parsed_args: Dict[str, Any] = {}

    @classmethod
    def initialize(cls, config_file: Optional[Path] = None) -> None:
        """
        Initialize configuration from defaults, config file, environment and command line args.

        Asset kind overrides are validated here so a bad config fails at startup
        rather than on the first texture load.

        Args:
            config_file: Optional path to config file. If None, uses --config from command line
                or ./config.json when present.

        Raises:
            ValueError: If the config file is not valid JSON or asset kind settings are invalid.
        """
        if cls._initialized:
            return

        cls._config = dict(cls._defaults)

        parsed_args = cls._parse_command_line()

        config_path = config_file or parsed_args.get("config")
        if config_path is None:
            config_path = "./config.json"

        if config_path:
            if not isinstance(config_path, Path):
                config_path = Path(config_path)
            if config_path.exists():
                cls._load_config_file(config_path)
            else:
                print(f"Warning: Config file '{config_path}' not found. Using defaults and command line arguments only.",
                      file=sys.stderr)

        cls._apply_environment()
        cls._apply_command_line_args(parsed_args)

        if "config" in cls._config and cls._config["config"] is not None:
            cls._config["config_file"] = str(cls._config["config"])

        cls._config["port"] = int(cls._config["port"])
        cls._validate_asset_kinds()

        cls._initialized = True

    @classmethod
    def _parse_command_line(cls) -> Dict[str, Any]:
        """
        Parse command line arguments using Typer.

        Returns:
            Dictionary of parsed command line arguments
        """
        parsed_values: Dict[str, Any] = {}

        def callback(
            module: str = typer.Argument("server", help="Module to run: server, crawl, check, noop"),
            config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to configuration file (JSON format). Default: ./config.json"),
            log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Set the logging level", case_sensitive=False),
            host: Optional[str] = typer.Option(None, "--host", help="Host of the texture gateway server"),
            port: Optional[int] = typer.Option(None, "--port", "-p", help="Port of the texture gateway server"),
            asset_root: Optional[Path] = typer.Option(None, "--asset-root", help="Directory that saved textures are written under"),
            browse_root: Optional[str] = typer.Option(None, "--browse-root", help="Remote directory listing URL to crawl"),
            kind: Optional[str] = typer.Option(None, "--kind", "-k", help="Asset kind to browse (matcap, map, normalMap)"),
            uniform: Optional[str] = typer.Option(None, "--uniform", help="Shader uniform that receives loaded textures"),
            log_color: bool = typer.Option(False, "--log-color", help="Color the log severity in terminal. Only applies when stdout is a TTY."),
        ) -> None:
            """Callback to capture Typer parsed values."""
            parsed_values["module"] = module
            if config is not None:
                parsed_values["config"] = config
            if log_level is not None:
                parsed_values["log_level"] = log_level.upper()
            if host is not None:
                parsed_values["host"] = host
            if port is not None:
                parsed_values["port"] = port
            if asset_root is not None:
                parsed_values["asset_root"] = str(asset_root)
            if browse_root is not None:
                parsed_values["browse_root"] = browse_root
            if kind is not None:
                parsed_values["asset_kind"] = kind
            if uniform is not None:
                parsed_values["uniform"] = uniform
            if log_color:
                parsed_values["log_color"] = True

        # A single command so the first positional (module) is not treated as a subcommand.
        app = typer.Typer(help="Texture Gateway - browse, proxy and save remote textures")
        app.command()(callback)

        try:
            app(sys.argv[1:], standalone_mode=False)
        except SystemExit:
            raise  # --help: let SystemExit propagate so the process exits

        # If --help was used, the callback is never invoked and module is missing; exit cleanly.
        if "module" not in parsed_values:
            sys.exit(0)

        return parsed_values

    @classmethod
    def _load_config_file(cls, config_path: Path) -> None:
        """
        Load configuration from JSON file and merge into config.

        Args:
            config_path: Path to the JSON config file
        """
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_file_data = json.load(f)
                cls._config.update(config_file_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file '{config_path}': {e}")
        except Exception as e:
            raise IOError(f"Error reading config file '{config_path}': {e}")

    @classmethod
    def _apply_environment(cls) -> None:
        """Apply environment variables (and a .env file in cwd, if any) over config file values."""
        load_dotenv()
        for env_name, key in _ENV_KEYS.items():
            value = os.environ.get(env_name)
            if value:
                cls._config[key] = value

    @classmethod
    def _apply_command_line_args(cls, parsed_args: Dict[str, Any]) -> None:
        """
        Apply command line argument values to config, overriding all other sources.

        Args:
            parsed_args: Dictionary of parsed command line arguments from Typer
        """
        cls._parsed_args = parsed_args
        for key, value in parsed_args.items():
            if value is not None:
                cls._config[key] = value

    @classmethod
    def _validate_asset_kinds(cls) -> None:
        """Resolve asset kind overrides into specs; raises ValueError on unknown kinds or fields."""
        from asset_browser.AssetKinds import AssetKind, load_asset_kind_specs

        specs = load_asset_kind_specs(cls._config.get("asset_kinds") or {})
        AssetKind.parse(cls._config["asset_kind"])
        cls._config["asset_kind_specs"] = specs

    @classmethod
    def get_args(cls) -> Dict[str, Any]:
        """
        Get the parsed command line arguments.

        Returns:
            Dictionary containing all command line arguments that were provided
        """
        if not cls._initialized:
            raise RuntimeError("Args has not been initialized. Call Args.initialize() first.")
        return cls._parsed_args.copy()

    @classmethod
    def get_config(cls) -> Dict[str, Any]:
        """
        Get the full configuration dictionary.

        Returns:
            Dictionary containing all configuration values
        """
        if not cls._initialized:
            raise RuntimeError("Args has not been initialized. Call Args.initialize() first.")
        return cls._config.copy()
