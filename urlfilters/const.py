# Copyright (c) 2015-2025 NASK. All rights reserved.

from types import MappingProxyType


#: Special schemes (see: https://url.spec.whatwg.org/#special-scheme)
#: mapped to their default ports.  Note: `file:` has no numeric port.
SPECIAL_SCHEME_DEFAULT_PORT = MappingProxyType({
    'ftp:': '21',
    'file:': '',
    'gopher:': '70',
    'http:': '80',
    'https:': '443',
    'ws:': '80',
    'wss:': '443',
})

#: Schemes allowed when no scheme whitelist is specified.
DEFAULT_SCHEMES = ('http', 'https')

#: Prepended to rejected URLs by the default *unsafe* callback.
UNSAFE_PREFIX = 'unsafe:'

TOPLEVEL_PACKAGE_NAME = 'urlfilters'
