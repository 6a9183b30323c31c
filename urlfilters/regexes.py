# Copyright (c) 2015-2025 NASK. All rights reserved.

"""
This module contains several regular expression objects and pattern
strings (most of them are used in other parts of the *urlfilters*
library).

The patterns follow (a trimmed subset of) the URL parsing algorithm
described in https://url.spec.whatwg.org/#url-parsing -- only as much
of it as is necessary to find the boundaries between the scheme, the
authority, the host and the port parts of a URL.
"""


import re


#
# Whitelist entry validation

#: Scheme, with an optional trailing colon (the scheme itself
#: is captured by the first group).
#:
#: Ref: https://url.spec.whatwg.org/#scheme-state
#:
#: Used by :class:`urlfilters.matchers.SchemeMatcher`.
SCHEME_WHITELIST_ENTRY_REGEX = re.compile(r'''
    \A
    (
        [a-zA-Z]
        [a-zA-Z0-9+.\-]*
    )
    :?
    \Z
''', re.ASCII | re.VERBOSE)


#: Hostname (or IPv4 address in any form), or an IPv6-like address
#: in square brackets.
#:
#: * `@` is not allowed, as it would be consumed by the authority part;
#: * the space character is allowed, as browsers accept it;
#: * TAB, LF and CR are *not* allowed (they should be stripped by
#:   developers).
#:
#: Ref: https://url.spec.whatwg.org/#concept-host-parser
#: and https://url.spec.whatwg.org/#concept-ipv6-parser
#:
#: Used by :class:`urlfilters.matchers.AuthorityMatcher`.
HOSTNAME_WHITELIST_ENTRY_REGEX = re.compile(r'''
    \A
    (?:
        [^\x00\t\n\r#/:?\[\]\\]+
    |
        \[
        [^\x00\t\n\r/?#\\]+
        \]
    )
    \Z
''', re.VERBOSE)


#
# Matching URLs at runtime

#: Matches (at the beginning of a string) if the string has neither
#: a scheme nor the `//`-like prefix, i.e., it can only be a relative
#: path (optionally followed by a query and/or fragment).
#:
#: * the first negative lookahead prevents entering the *scheme
#:   state*; note that TAB, LF and CR are accepted by browsers
#:   inside schemes;
#: * the second one prevents the transitions from the *relative
#:   state*, through the *relative slash state*, to the *special
#:   authority ignore slashes state*.
#:
#: Ref: https://url.spec.whatwg.org/
REL_PATH_REGEX = re.compile(r'''
    \A
    (?!
        [a-z]
        [a-z0-9+\-.\t\n\r]*
        :
    |
        [/\\]{2}
    )
''', re.ASCII | re.IGNORECASE | re.VERBOSE)


#: The image *data* URIs which are known to be safe (the first
#: group captures the scheme, without the colon).
IMG_DATA_URI_REGEX = re.compile(r'''
    \A
    (data)
    :image/
    (?:
        jpe?g
    |
        gif
    |
        png
    )
    ;base64,
    [a-z0-9+/=]*
    \Z
''', re.ASCII | re.IGNORECASE | re.VERBOSE)


#: Whitespace characters that are allowed (and then
#: stripped) in the origin part of a URL.
ORIGIN_WHITESPACE_REGEX = re.compile(r'[\t\n\r]+')


#: Scheme-relative URL prefix (two slashes of any kind).
REL_SCHEME_PATTERN = r'[/\\]{2}'

#: Any number of leading slashes (of any kind) + optional authority
#: (user info) terminated with `@`.
#:
#: Many slashes after the scheme are merely a syntax violation, so --
#: following browsers -- we continue parsing.  The authority is
#: captured without the trailing `@` (no separation of the username
#: and password, no percent-decoding).
#:
#: Ref: https://url.spec.whatwg.org/#special-authority-ignore-slashes-state
#: and https://url.spec.whatwg.org/#authority-state
AUTHORITY_PREFIX_PATTERN = r'\A[/\\]*(?:(?P<authority>[^/\\?#]*)@)?'

#: Zero or more arbitrary labels, each followed by a dot (TAB, LF and CR
#: are accepted here as they are stripped later).
SUBDOMAIN_WILDCARD_PATTERN = r'(?:[^\x00#/:?\[\]\\]+\.)*'

#: Any valid host (see also: :data:`HOSTNAME_WHITELIST_ENTRY_REGEX`),
#: TAB, LF and CR accepted as they are stripped later.
ANY_HOST_PATTERN = r'[^\x00#/:?\[\]\\]+|\[[^\x00/?#\\]+\]'

#: Something that may be an IPv4 address written in some shorthand
#: (hexadecimal/octal/incomplete) notation.
IPv4_SHORTHAND_CANDIDATE_PATTERN = r'[0-9a-fA-FxX.]+'

#: End of the string (optionally preceded by a bare colon), or a port
#: number (TAB, LF and CR accepted as they are stripped later), or
#: a lookahead at a path/query/fragment delimiter (the delimiter is
#: required to ensure the whole host has been consumed).
#:
#: Note: also the port number must be followed by the end of the
#: string or a delimiter; otherwise, e.g., `//example.com:80@evil.com`
#: would be matched as the host `example.com` with the port `80`,
#: whereas browsers see the host `evil.com` (and the password `80`).
#:
#: Ref: https://url.spec.whatwg.org/#host-state
#: and https://url.spec.whatwg.org/#port-state
HOST_TERMINATOR_PATTERN = r'(?::?\Z|:(?P<port>[0-9\t\n\r]+)(?=[/?#\\]|\Z)|(?=[/?#\\]))'


#
# Host parsing

#: Characters that make a (decoded) host invalid.
#:
#: We follow https://url.spec.whatwg.org/#concept-host-parser except
#: the space character (U+0020) which is accepted by browsers.
HOST_INVALID_CHAR_REGEX = re.compile(r'[\x00\t\n\r#%/:?@\[\\\]]')


#: Decimal IPv4 address part.
IPv4_PART_DECIMAL_REGEX = re.compile(r'\A[0-9]+\Z', re.ASCII)

#: Hexadecimal IPv4 address part (note: the digits after
#: the `0x` prefix are optional; `0x` alone means 0).
IPv4_PART_HEX_REGEX = re.compile(r'\A0[xX][0-9a-fA-F]*\Z', re.ASCII)

#: Octal IPv4 address part.
IPv4_PART_OCTAL_REGEX = re.compile(r'\A0[0-7]+\Z', re.ASCII)
