"""
Default configuration and logging setup
"""

import logging
from typing import Any, Dict, Optional

# Default configuration
DEFAULT_CONFIG = {
    'last_accessed_days': 90,
    'include_service_roles': False,
    'exclude_last_accessed_none': False,
    'policy_scope': 'Local',
    'max_workers': None,  # None means one worker per request
    'output_format': 'csv',
    'log_level': 'WARNING',
    'log_file': None,
    'profile': None,
    'region': None,
}

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def build_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Layer non-None overrides on top of a copy of the defaults"""
    config = DEFAULT_CONFIG.copy()
    for key, value in (overrides or {}).items():
        if key not in config:
            raise KeyError(f"Unknown configuration key: {key}")
        if value is not None:
            config[key] = value
    return config


def setup_logging(level: str = 'WARNING', log_file: Optional[str] = None):
    """Setup logging configuration"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
