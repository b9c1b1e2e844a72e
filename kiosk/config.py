"""
Configuration loading.

Config is a JSON file merged over DEFAULT_CONFIG (nested dicts merge key by
key; unknown keys are kept for the platform glue):

    {
        "host": "0.0.0.0",
        "port": 8123,
        "publicDir": "/srv/kiosk/public",
        "logging": {"logDir": "./logs", "level": "DEBUG", "utc": true}
    }
"""

import copy
import orjson
from pathlib import Path
from typing import Any, Dict, Optional, Union

DEFAULT_CONFIG: Dict[str, Any] = {
    'host': '0.0.0.0',
    'port': 8123,
    'publicDir': None,
    'logging': {
        'logDir': None,
        'level': 'INFO',
        'utc': False
    }
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validateConfig(config: Dict[str, Any]) -> Dict[str, Any]:
    port = config.get('port')
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ValueError(f"Invalid port: {port!r}")
    if not isinstance(config.get('host'), str) or not config['host']:
        raise ValueError(f"Invalid host: {config.get('host')!r}")
    return config


def loadConfig(configPath: Optional[Union[str, Path]] = None, **overrides) -> Dict[str, Any]:
    """
    Load configuration from a JSON file (optional) plus keyword overrides.

    Overrides with value None are ignored so CLI flags can be passed through
    unconditionally.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if configPath is not None:
        with open(configPath, 'rb') as f:
            fileConfig = orjson.loads(f.read())
        if not isinstance(fileConfig, dict):
            raise ValueError(f"Config file must contain a JSON object: {configPath}")
        config = _merge(config, fileConfig)

    config = _merge(config, {k: v for k, v in overrides.items() if v is not None})
    return validateConfig(config)
