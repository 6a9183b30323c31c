# Copyright (c) 2015-2025 NASK. All rights reserved.

"""
*urlfilters* -- whitelist-based URL filters.
"""

from urlfilters.exceptions import (
    ConfigError,
    InvalidHostnameError,
    InvalidSchemeError,
    URLFilterConfigError,
)
from urlfilters.host_helpers import parse_host
from urlfilters.url_filter import (
    Classification,
    URLFilter,
    URLParts,
    make_url_filter,
)


__all__ = [
    'Classification',
    'ConfigError',
    'InvalidHostnameError',
    'InvalidSchemeError',
    'URLFilter',
    'URLFilterConfigError',
    'URLParts',
    'make_url_filter',
    'parse_host',
]
