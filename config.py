"""
Service configuration read from the environment at startup
"""

import os

from analyzer import DEFAULT_BRUTE_FORCE_THRESHOLD


def _env_int(name, default, minimum=1):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def _env_flag(name, default=True):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ('0', 'false', 'no', 'off')


class Config:
    BRUTE_FORCE_THRESHOLD = _env_int('LOG_ANALYZER_THRESHOLD', DEFAULT_BRUTE_FORCE_THRESHOLD)
    MAX_CONTENT_LENGTH = _env_int('LOG_ANALYZER_MAX_UPLOAD_MB', 50) * 1024 * 1024  # 50MB max file size
    INCLUDE_CHART = _env_flag('LOG_ANALYZER_CHARTS')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = _env_int('PORT', 5000)
