# Copyright (c) 2015-2025 NASK. All rights reserved.

"""
The URL whitelist filter: the factory function, :func:`make_url_filter`,
and the (immutable) callable filter objects it produces.

A filter classifies an arbitrary input string as either matching the
whitelist (in which case a caller-supplied callback is invoked with the
decomposed URL parts) or not matching it (in which case the fallback
callback is invoked; by default, it prefixes the string with
``unsafe:``, so that the result is neutralized, e.g., for the purpose
of safe insertion into an HTML attribute).

>>> url_filter = make_url_filter(hostnames=['example.com'], subdomain=True)
>>> url_filter('https://www.example.com/foo')
'https://www.example.com/foo'
>>> url_filter('https://evil.com/?example.com')
'unsafe:https://evil.com/?example.com'
>>> url_filter('javascript:alert(1)')
'unsafe:javascript:alert(1)'

>>> url_filter = make_url_filter(
...     abs_callback=lambda url, *parts: '|'.join(parts))
>>> url_filter('HTTP://user@Example.COM:80/path?query#fragment')
'http|user|example.com||/path?query#fragment'
>>> url_filter('https://example.com:8443')
'https||example.com|8443|'
"""

from collections.abc import (
    Mapping,
    Sequence,
    Set,
)
from typing import (
    Callable,
    Iterable,
    NamedTuple,
    Optional,
)

from urlfilters.const import (
    SPECIAL_SCHEME_DEFAULT_PORT,
    UNSAFE_PREFIX,
)
from urlfilters.encoding_helpers import (
    as_unicode,
    idna_to_ascii as _idna_to_ascii,
)
from urlfilters.host_helpers import parse_host
from urlfilters.log_helpers import get_logger
from urlfilters.matchers import (
    AuthorityMatcher,
    SchemeMatch,
    SchemeMatcher,
)
from urlfilters.regexes import (
    HOST_INVALID_CHAR_REGEX,
    IMG_DATA_URI_REGEX,
    ORIGIN_WHITESPACE_REGEX,
    REL_PATH_REGEX,
)


LOGGER = get_logger(__name__)


VERDICT_ABSOLUTE = 'absolute'
VERDICT_RELATIVE = 'relative'
VERDICT_SCHEME_ONLY = 'scheme-only'
VERDICT_UNSAFE = 'unsafe'

# (the C0 control characters and the space)
_LEADING_CHARS_TO_STRIP = ''.join(map(chr, range(0x21)))


class URLParts(NamedTuple):

    """
    The decomposed parts of a matching absolute URL (the arguments
    the `abs_callback` is called with).
    """

    url: str
    scheme: str      # lowercased, without the colon ('' if scheme-relative)
    authority: str   # as is (only TAB, LF and CR stripped)
    host: str        # lowercased, IDNA-converted if requested
    port: str        # '' if not specified or equal to the default one
    path: str        # path + query + fragment


class Classification(NamedTuple):

    """
    The result of :meth:`URLFilter.classify`.

    `verdict` is one of: ``'absolute'`` (`parts` is an :class:`URLParts`
    instance), ``'relative'``, ``'scheme-only'`` (the scheme matched
    and no further checks were configured) or ``'unsafe'``.
    """

    verdict: str
    url: str
    parts: Optional[URLParts] = None


def _return_url(url, *args):
    return url


def _make_unsafe(url):
    return UNSAFE_PREFIX + url


def normalize_input(url) -> str:
    r"""
    Coerce the given object to a :class:`str` and strip off any leading
    C0 control characters and spaces (trailing ones are left intact).

    >>> normalize_input(' \t\x00http://example.com/ ')
    'http://example.com/ '
    >>> normalize_input(b'http://b\xc3\xbccher.example/')
    'http://bücher.example/'
    >>> normalize_input(None)
    ''
    >>> normalize_input(['http://example.com/'])
    ''
    >>> normalize_input(42)
    '42'
    """
    if isinstance(url, (bytes, bytearray, memoryview)):
        url = as_unicode(url, 'surrogateescape')
    elif url is None or (isinstance(url, (Mapping, Sequence, Set))
                         and not isinstance(url, str)):
        url = ''
    else:
        url = str(url)
    return url.lstrip(_LEADING_CHARS_TO_STRIP)


class URLFilter(object):

    """
    A callable URL filter (see :func:`make_url_filter` for the
    description of the constructor keyword arguments).

    Instances are immutable:

    >>> url_filter = URLFilter(schemes=['https'])
    >>> url_filter.rel_path = True          # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    AttributeError: ...
    """

    __slots__ = (
        '_scheme_matcher',
        '_authority_matcher',
        '_img_data_uri_regex',
        '_rel_path_regex',
        '_rel_path_only',
        '_idna_to_ascii',
        '_host_parsing',
        '_abs_callback',
        '_rel_callback',
        '_unsafe_callback',
    )

    def __init__(self, *,
                 schemes: Optional[Iterable[str]] = None,
                 rel_scheme: bool = False,
                 hostnames: Optional[Iterable[str]] = None,
                 subdomain: bool = False,
                 rel_path: bool = False,
                 rel_path_only: bool = False,
                 img_data_uris: bool = False,
                 idna_to_ascii: bool = False,
                 host_parsing: bool = False,
                 abs_callback: Optional[Callable[..., object]] = None,
                 rel_callback: Optional[Callable[[str], object]] = None,
                 unsafe_callback: Optional[Callable[[str], object]] = None):
        for name, callback in [('abs_callback', abs_callback),
                               ('rel_callback', rel_callback),
                               ('unsafe_callback', unsafe_callback)]:
            if callback is not None and not callable(callback):
                raise TypeError('{}={!a} is not callable'.format(name, callback))
        hostnames = tuple(hostnames or ())
        init = self._init_attr
        init('_scheme_matcher', SchemeMatcher(schemes, rel_scheme=rel_scheme))
        init('_authority_matcher', (
            AuthorityMatcher(hostnames,
                             subdomain=subdomain,
                             idna_to_ascii=idna_to_ascii)
            if hostnames or abs_callback is not None
            else None))
        init('_img_data_uri_regex', IMG_DATA_URI_REGEX if img_data_uris else None)
        init('_rel_path_regex', REL_PATH_REGEX if (rel_path or rel_path_only) else None)
        init('_rel_path_only', bool(rel_path_only))
        init('_idna_to_ascii', bool(idna_to_ascii))
        init('_host_parsing', bool(host_parsing))
        init('_abs_callback', _return_url if abs_callback is None else abs_callback)
        init('_rel_callback', _return_url if rel_callback is None else rel_callback)
        init('_unsafe_callback', _make_unsafe if unsafe_callback is None else unsafe_callback)
        LOGGER.debug('%a created', self)

    def _init_attr(self, name, value):
        object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError('{} instances are immutable'.format(self.__class__.__name__))

    def __delattr__(self, name):
        raise AttributeError('{} instances are immutable'.format(self.__class__.__name__))

    def __repr__(self):
        return ('<{0.__class__.__name__}: '
                '{0._scheme_matcher!r}, '
                '{0._authority_matcher!r}, '
                'img_data_uris={1!r}, '
                'rel_path={2!r}, '
                'rel_path_only={0._rel_path_only!r}, '
                'idna_to_ascii={0._idna_to_ascii!r}, '
                'host_parsing={0._host_parsing!r}>'.format(
                    self,
                    self._img_data_uri_regex is not None,
                    self._rel_path_regex is not None))

    def __call__(self, url):
        """
        Filter the given URL, i.e., invoke exactly one of the callbacks
        (or none, if the scheme matched and no further checks were
        configured) and return the result.
        """
        verdict, url, parts = self.classify(url)
        if verdict == VERDICT_ABSOLUTE:
            return self._abs_callback(*parts)
        if verdict == VERDICT_RELATIVE:
            return self._rel_callback(url)
        if verdict == VERDICT_SCHEME_ONLY:
            return url
        assert verdict == VERDICT_UNSAFE
        return self._unsafe_callback(url)

    def classify(self, url) -> Classification:
        """
        Classify the given URL, *without* invoking any callbacks.

        >>> url_filter = URLFilter(hostnames=['example.com'], rel_path=True)
        >>> url_filter.classify('https://Example.com:443/foo')
        Classification(verdict='absolute', url='https://Example.com:443/foo', \
parts=URLParts(url='https://Example.com:443/foo', scheme='https', authority='', \
host='example.com', port='', path='/foo'))
        >>> url_filter.classify('foo/bar')
        Classification(verdict='relative', url='foo/bar', parts=None)
        >>> url_filter.classify('//example.com/foo')
        Classification(verdict='unsafe', url='//example.com/foo', parts=None)
        """
        url = normalize_input(url)

        if self._rel_path_regex is not None:
            if self._rel_path_regex.search(url):
                return Classification(VERDICT_RELATIVE, url)
            if self._rel_path_only:
                return Classification(VERDICT_UNSAFE, url)

        scheme_match = self._scheme_matcher.match(url)
        if scheme_match is None and self._img_data_uri_regex is not None:
            data_uri_match = self._img_data_uri_regex.search(url)
            if data_uri_match is not None:
                scheme_match = SchemeMatch(data_uri_match.group(1).lower(),
                                           url[data_uri_match.end():])
        if scheme_match is None:
            return Classification(VERDICT_UNSAFE, url)

        if self._authority_matcher is None:
            return Classification(VERDICT_SCHEME_ONLY, url)

        scheme, rest = scheme_match
        if scheme:
            default_port = SPECIAL_SCHEME_DEFAULT_PORT.get(scheme + ':')
            if default_port is None:
                # non-special scheme: no authority/host/port to check
                return Classification(VERDICT_ABSOLUTE, url,
                                      URLParts(url, scheme, '', '', '', rest))
        else:
            # scheme-relative URL: the default port is unknown
            default_port = None

        authority_match = self._authority_matcher.match(rest)
        if authority_match is None:
            return Classification(VERDICT_UNSAFE, url)

        authority = ORIGIN_WHITESPACE_REGEX.sub('', authority_match.authority)
        host = ORIGIN_WHITESPACE_REGEX.sub('', authority_match.host).lower()
        port = ORIGIN_WHITESPACE_REGEX.sub('', authority_match.port)
        if self._host_parsing:
            # (percent-decoding is done *before* IDNA conversion)
            host = parse_host(host, idna_to_ascii=self._idna_to_ascii)
            if host is None:
                LOGGER.debug('cannot parse host of %a', url)
                return Classification(VERDICT_UNSAFE, url)
            host = host.lower()
        elif self._idna_to_ascii:
            try:
                ascii_host = _idna_to_ascii(host)
            except ValueError:
                LOGGER.debug('cannot convert host %a to ASCII (IDNA)', host)
                return Classification(VERDICT_UNSAFE, url)
            if ascii_host != host and HOST_INVALID_CHAR_REGEX.search(ascii_host):
                # IDNA mapping turned some characters into delimiters
                # (e.g., fullwidth `\uff0f` into `/`, `\uff1a` into `:`)
                LOGGER.debug('host %a converted to ASCII (IDNA) contains '
                             'illegal characters: %a', host, ascii_host)
                return Classification(VERDICT_UNSAFE, url)
            host = ascii_host
        if port == default_port:
            port = ''
        return Classification(VERDICT_ABSOLUTE, url,
                              URLParts(url, scheme, authority, host, port,
                                       authority_match.rest))


def make_url_filter(*,
                    schemes: Optional[Iterable[str]] = None,
                    rel_scheme: bool = False,
                    hostnames: Optional[Iterable[str]] = None,
                    subdomain: bool = False,
                    rel_path: bool = False,
                    rel_path_only: bool = False,
                    img_data_uris: bool = False,
                    idna_to_ascii: bool = False,
                    host_parsing: bool = False,
                    abs_callback: Optional[Callable[..., object]] = None,
                    rel_callback: Optional[Callable[[str], object]] = None,
                    unsafe_callback: Optional[Callable[[str], object]] = None) -> URLFilter:
    """
    Make a URL filter.

    Kwargs (all optional):
        `schemes` (iterable of str; default: ``['http', 'https']``):
            Whitelisted schemes (with or without the trailing colon;
            case-insensitive).
        `rel_scheme` (bool; default: False):
            Whether to accept scheme-relative URLs (``//host/path``).
        `hostnames` (iterable of str; default: none):
            Whitelisted hostnames (case-insensitive).  IPv4 addresses
            may be given in any notation accepted by browsers (they are
            canonicalized, and any notation of such an address in a URL
            is matched).  IPv6 addresses must be given in square
            brackets.  If not given, hosts are not checked.
        `subdomain` (bool; default: False):
            Whether to accept also subdomains of `hostnames`.
        `rel_path` (bool; default: False):
            Whether to accept relative paths (no scheme, no ``//``).
        `rel_path_only` (bool; default: False):
            Whether to accept *only* relative paths.
        `img_data_uris` (bool; default: False):
            Whether to accept base64-encoded jpeg/gif/png *data* URIs.
        `idna_to_ascii` (bool; default: False):
            Whether to convert hosts (both whitelisted and matched
            ones) to their ASCII (IDNA) form.
        `host_parsing` (bool; default: False):
            Whether matched hosts are to be parsed (percent-decoded,
            validated, IPv4 addresses canonicalized) before being
            passed to `abs_callback` (a failure makes the URL unsafe).
        `abs_callback` (callable; default: returns the URL intact):
            Called -- with the :class:`URLParts` items as arguments:
            `url`, `scheme`, `authority`, `host`, `port`, `path` --
            for each absolute URL that matched the whitelists.  If
            given, the authority/host/port part of each URL with a
            *special* scheme (see
            :data:`~urlfilters.const.SPECIAL_SCHEME_DEFAULT_PORT`) is
            checked even if `hostnames` is not given.
        `rel_callback` (callable; default: returns the URL intact):
            Called with the URL as the sole argument for each accepted
            relative path.
        `unsafe_callback` (callable; default: prefixes the URL with
        ``unsafe:``):
            Called with the URL as the sole argument for each URL that
            did not match.

    Returns:
        A :class:`URLFilter` instance -- a callable that takes a URL and
        returns the result of the appropriate callback.

    Raises:
        :exc:`~urlfilters.exceptions.InvalidSchemeError` or
        :exc:`~urlfilters.exceptions.InvalidHostnameError` (both are
        :exc:`TypeError` subclasses) if any of the whitelist entries
        is invalid; :exc:`TypeError` if any callback is not callable.

    >>> make_url_filter(schemes=['http', 'ht!tp'])  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    urlfilters.exceptions.InvalidSchemeError: 'ht!tp' is an invalid scheme
    """
    return URLFilter(
        schemes=schemes,
        rel_scheme=rel_scheme,
        hostnames=hostnames,
        subdomain=subdomain,
        rel_path=rel_path,
        rel_path_only=rel_path_only,
        img_data_uris=img_data_uris,
        idna_to_ascii=idna_to_ascii,
        host_parsing=host_parsing,
        abs_callback=abs_callback,
        rel_callback=rel_callback,
        unsafe_callback=unsafe_callback)
