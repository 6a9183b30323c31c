# Copyright (c) 2015-2025 NASK. All rights reserved.

"""
Construction-time compilation of scheme and hostname whitelists into
single-pass matchers (one regular expression each).
"""

import re
from typing import (
    Iterable,
    NamedTuple,
    Optional,
)

from urlfilters.const import DEFAULT_SCHEMES
from urlfilters.encoding_helpers import idna_to_ascii as _idna_to_ascii
from urlfilters.exceptions import (
    InvalidHostnameError,
    InvalidSchemeError,
    IPv4ParsingError,
)
from urlfilters.host_helpers import (
    parse_ipv4,
    parse_ipv4_and_serialize,
    serialize_ipv4,
)
from urlfilters.log_helpers import get_logger
from urlfilters.regexes import (
    ANY_HOST_PATTERN,
    AUTHORITY_PREFIX_PATTERN,
    HOST_TERMINATOR_PATTERN,
    HOSTNAME_WHITELIST_ENTRY_REGEX,
    IPv4_SHORTHAND_CANDIDATE_PATTERN,
    REL_SCHEME_PATTERN,
    SCHEME_WHITELIST_ENTRY_REGEX,
    SUBDOMAIN_WILDCARD_PATTERN,
)


LOGGER = get_logger(__name__)


class SchemeMatch(NamedTuple):
    scheme: str   # lowercased, without the colon ('' if scheme-relative)
    rest: str     # everything after the scheme (or after the `//`-like prefix)


class AuthorityMatch(NamedTuple):
    authority: str   # raw (everything before `@`, or '')
    host: str        # raw (not lowercased, whitespace not stripped...)
    port: str        # raw ('' if not specified)
    rest: str        # path + query + fragment


class SchemeMatcher(object):

    """
    Matches the scheme of a URL against the whitelist of schemes.

    Constructor args/kwargs:
        `schemes` (iterable of str, or None; default: None):
            The whitelist of schemes (the trailing colon is optional,
            the letter case does not matter).  If not given or empty,
            ``http`` and ``https`` are used.

        `rel_scheme` (bool; default: False):
            Whether scheme-relative URLs (starting with ``//``, where
            each slash can also be a backslash) are allowed.

    Raises:
        :exc:`~urlfilters.exceptions.InvalidSchemeError` if any of
        the whitelisted schemes is not valid.

    >>> m = SchemeMatcher(['HTTPS:', 'mailto'])
    >>> m.schemes
    ('https', 'mailto')
    >>> m.match('hTtPs://example.com/')
    SchemeMatch(scheme='https', rest='//example.com/')
    >>> m.match('MailTo:someone@example.com')
    SchemeMatch(scheme='mailto', rest='someone@example.com')
    >>> m.match('http://example.com/') is None
    True
    >>> m.match('//example.com/') is None
    True

    >>> m = SchemeMatcher(rel_scheme=True)
    >>> m.schemes
    ('http', 'https')
    >>> m.match('\\\\/example.com/')
    SchemeMatch(scheme='', rest='example.com/')
    >>> m.match('javascript:alert(1)') is None
    True

    >>> SchemeMatcher(['http', 'ht!tp'])      # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    urlfilters.exceptions.InvalidSchemeError: 'ht!tp' is an invalid scheme
    """

    def __init__(self,
                 schemes: Optional[Iterable[str]] = None,
                 *,
                 rel_scheme: bool = False):
        if schemes is not None:
            schemes = tuple(map(self._clean_scheme, schemes))
        if not schemes:
            schemes = DEFAULT_SCHEMES
        self.schemes = schemes
        self.rel_scheme = rel_scheme
        pattern = r'\A(?:(?P<scheme>{}):{})'.format(
            '|'.join(map(re.escape, self.schemes)),
            ('|' + REL_SCHEME_PATTERN if rel_scheme else ''))
        self._regex = re.compile(pattern, re.IGNORECASE)
        LOGGER.debug('%a compiled to the pattern %a', self, self._regex.pattern)

    def __repr__(self):
        return '{}({!r}, rel_scheme={!r})'.format(
            self.__class__.__name__,
            list(self.schemes),
            self.rel_scheme)

    def match(self, url: str) -> Optional[SchemeMatch]:
        match = self._regex.search(url)
        if match is None:
            return None
        scheme = (match.group('scheme') or '').lower()
        return SchemeMatch(scheme, url[match.end():])

    @staticmethod
    def _clean_scheme(scheme):
        match = (SCHEME_WHITELIST_ENTRY_REGEX.search(scheme) if isinstance(scheme, str)
                 else None)
        if match is None:
            raise InvalidSchemeError(scheme)
        # lowercased, with the trailing colon skipped
        return match.group(1).lower()


class AuthorityMatcher(object):

    """
    Matches the authority, host and port parts of a URL (what remains
    after the scheme) against the whitelist of hostnames.

    Constructor args/kwargs:
        `hostnames` (iterable of str, or None; default: None):
            The whitelist of hostnames (the letter case does not
            matter).  Each of them must be a valid hostname, or IPv4
            address (in any notation accepted by browsers -- it will
            be canonicalized), or IPv6 address in square brackets.  If
            not given or empty, *any* valid host is accepted.

        `subdomain` (bool; default: False):
            Whether subdomains of the whitelisted hostnames are also
            accepted (has no effect on IPv4/IPv6 addresses).

        `idna_to_ascii` (bool; default: False):
            Whether the whitelisted hostnames are to be converted to
            their ASCII (IDNA) form.

    Raises:
        :exc:`~urlfilters.exceptions.InvalidHostnameError` if any of
        the whitelisted hostnames is not valid.

    >>> m = AuthorityMatcher(['example.com', '0x7f.1'], subdomain=True)
    >>> m.hostnames
    ('example.com', '127.0.0.1')
    >>> m.match('//user:pass@WWW.Example.COM:8080/path?q#f')
    AuthorityMatch(authority='user:pass', host='WWW.Example.COM', port='8080', rest='/path?q#f')
    >>> m.match('//example.com')
    AuthorityMatch(authority='', host='example.com', port='', rest='')
    >>> m.match('//0177.0.0.1/') # (any notation of a whitelisted IPv4 address)
    AuthorityMatch(authority='', host='127.0.0.1', port='', rest='/')
    >>> m.match('//evilexample.com/') is None
    True
    >>> m.match('//example.com.evil.com/') is None
    True
    >>> m.match('//1.127.0.0.1/') is None
    True

    >>> AuthorityMatcher(['exa/mple.com'])      # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    urlfilters.exceptions.InvalidHostnameError: 'exa/mple.com' is an invalid hostname
    """

    def __init__(self,
                 hostnames: Optional[Iterable[str]] = None,
                 *,
                 subdomain: bool = False,
                 idna_to_ascii: bool = False):
        self.subdomain = subdomain
        self.idna_to_ascii = idna_to_ascii
        self._ipv4_hosts = set()
        self.hostnames = tuple(map(self._clean_hostname, hostnames or ()))
        self._ipv4_hosts = frozenset(self._ipv4_hosts)
        self._regex = re.compile(self._make_pattern(), re.IGNORECASE)
        LOGGER.debug('%a compiled to the pattern %a', self, self._regex.pattern)

    def __repr__(self):
        return '{}({!r}, subdomain={!r}, idna_to_ascii={!r})'.format(
            self.__class__.__name__,
            list(self.hostnames),
            self.subdomain,
            self.idna_to_ascii)

    def match(self, rest: str) -> Optional[AuthorityMatch]:
        match = self._regex.search(rest)
        if match is None:
            return None
        host = match.group('host')
        if host is None:
            # here we have some IPv4-address-like host that
            # must be one of the whitelisted IPv4 addresses
            host = parse_ipv4_and_serialize(match.group('ipv4_host'))
            if host not in self._ipv4_hosts:
                return None
        return AuthorityMatch(
            authority=(match.group('authority') or ''),
            host=host,
            port=(match.group('port') or ''),
            rest=rest[match.end():])

    def _clean_hostname(self, entry):
        if not (isinstance(entry, str)
                and HOSTNAME_WHITELIST_ENTRY_REGEX.search(entry)):
            raise InvalidHostnameError(entry)
        if entry.startswith('['):
            # IPv6 address (not parsed)
            return entry
        hostname = entry
        if self.idna_to_ascii:
            # (note: this is done *before* IPv4 parsing, as IDNA
            # mapping may turn, e.g., fullwidth digits into ASCII ones;
            # it may also produce some forbidden characters, e.g., `/`)
            try:
                hostname = _idna_to_ascii(hostname)
            except ValueError:
                raise InvalidHostnameError(entry) from None
            if not HOSTNAME_WHITELIST_ENTRY_REGEX.search(hostname):
                raise InvalidHostnameError(entry)
        try:
            ipv4 = parse_ipv4(hostname)
        except IPv4ParsingError:
            raise InvalidHostnameError(entry) from None
        if ipv4 is not None:
            hostname = serialize_ipv4(ipv4)
            self._ipv4_hosts.add(hostname)
        return hostname

    def _make_pattern(self):
        if not self.hostnames:
            host_pattern = '(?P<host>{})'.format(ANY_HOST_PATTERN)
        else:
            alternatives = []
            for hostname in self.hostnames:
                alt = re.escape(hostname)
                if self.subdomain and not (hostname.startswith('[')
                                           or hostname in self._ipv4_hosts):
                    alt = SUBDOMAIN_WILDCARD_PATTERN + alt
                alternatives.append(alt)
            host_pattern = '(?P<host>{})'.format('|'.join(alternatives))
            if self._ipv4_hosts:
                host_pattern = '(?:{}|(?P<ipv4_host>{}))'.format(
                    host_pattern,
                    IPv4_SHORTHAND_CANDIDATE_PATTERN)
        return AUTHORITY_PREFIX_PATTERN + host_pattern + HOST_TERMINATOR_PATTERN
