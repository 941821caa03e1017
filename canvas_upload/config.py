"""Configuration loading for the canvas uploader.

Supports three configuration sources, highest priority first:
1. Command-line flags
2. Environment variables (for CI/CD)
3. A JSON config file (for local development)

Environment Variable Format:
    DARK_USER=alice
    DARK_PASSWORD=secret
    DARK_CANVAS=demo
    DARK_HOST=production          # a named host or a literal URL

Config File Format:
    {
        "user": "alice",
        "canvas": "demo",
        "host": "dev",
        "hosts": {"staging": "https://staging.example.com"}
    }

The result is an explicit HostTarget and Credentials; nothing downstream
knows which named host was chosen.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from canvas_upload.errors import ConfigError, MissingArgument
from canvas_upload.models import Credentials, HostTarget

DEFAULT_CONFIG_PATH = "dark.json"

DEFAULT_HOST = "production"
DEV_HOST = "dev"

# Named hosts; the config file's "hosts" object may add or override entries
DEFAULT_HOSTS = {
    DEFAULT_HOST: "https://darklang.com",
    DEV_HOST: "http://darklang.localhost:8000",
}

# Maps setting names to environment variables
ENV_VARS = {
    "user": "DARK_USER",
    "password": "DARK_PASSWORD",
    "canvas": "DARK_CANVAS",
    "host": "DARK_HOST",
}

SETTING_KEYS = ("user", "password", "canvas", "host")


@dataclass(frozen=True)
class Settings:
    """Fully resolved settings for one run."""

    credentials: Credentials
    host: HostTarget


def load_from_json(config_path: str) -> dict:
    """Load settings from a JSON file.

    Args:
        config_path: Path to the config file.

    Returns:
        Dictionary with any of the keys user, password, canvas, host, hosts.

    Raises:
        ConfigError: If the file doesn't exist or can't be read, contains
                    invalid JSON, or has values of the wrong type.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a JSON object: {config_path}")

    for key in SETTING_KEYS:
        if key in data and not isinstance(data[key], str):
            raise ConfigError(f"Config value '{key}' must be a string")

    hosts = data.get("hosts", {})
    if not isinstance(hosts, dict) or not all(isinstance(v, str) for v in hosts.values()):
        raise ConfigError("Config value 'hosts' must map names to URLs")

    return data


def load_from_env() -> dict[str, str]:
    """Load settings from environment variables.

    Returns:
        Dictionary of the settings that are set and non-empty.
    """
    values = {}
    for key, env_var in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            values[key] = value
    return values


def is_url(value: str) -> bool:
    """Check whether a host value is a literal URL rather than a name."""
    return value.startswith(("http://", "https://"))


def resolve_base_url(host: str, hosts: dict[str, str]) -> str:
    """Turn a host name or URL into a base URL.

    Args:
        host: Named host (e.g. "dev") or literal http(s) URL
        hosts: Known named hosts

    Raises:
        ConfigError: If the name is unknown.
    """
    if is_url(host):
        return host
    if host not in hosts:
        known = ", ".join(sorted(hosts))
        raise ConfigError(f"Unknown host '{host}'. Known hosts: {known}")
    return hosts[host]


def resolve_settings(
    user: Optional[str] = None,
    password: Optional[str] = None,
    canvas: Optional[str] = None,
    host: Optional[str] = None,
    dev: bool = False,
    config_path: Optional[str] = None,
) -> Settings:
    """Merge flags, environment, and config file into Settings.

    Args:
        user: Username from the command line
        password: Password from the command line
        canvas: Canvas name from the command line
        host: Host name or URL from the command line
        dev: Select the "dev" host (ignored when ``host`` is given)
        config_path: Config file; if None, DEFAULT_CONFIG_PATH is read
                    when it exists

    Returns:
        Resolved Settings

    Raises:
        MissingArgument: If user, password, or canvas is not supplied.
        ConfigError: If the config file is invalid or the host is unknown.
    """
    if config_path is not None:
        file_values = load_from_json(config_path)
    elif Path(DEFAULT_CONFIG_PATH).exists():
        file_values = load_from_json(DEFAULT_CONFIG_PATH)
    else:
        file_values = {}

    env_values = load_from_env()

    if dev and host is None:
        host = DEV_HOST

    flag_values = {"user": user, "password": password, "canvas": canvas, "host": host}

    merged: dict[str, str] = {}
    for key in SETTING_KEYS:
        for source in (flag_values, env_values, file_values):
            if source.get(key):
                merged[key] = source[key]
                break

    for key in ("user", "password", "canvas"):
        if key not in merged:
            raise MissingArgument(key)

    hosts = dict(DEFAULT_HOSTS)
    hosts.update(file_values.get("hosts", {}))
    base_url = resolve_base_url(merged.get("host", DEFAULT_HOST), hosts)

    return Settings(
        credentials=Credentials(username=merged["user"], password=merged["password"]),
        host=HostTarget(base_url=base_url, canvas_name=merged["canvas"]),
    )
