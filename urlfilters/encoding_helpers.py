# Copyright (c) 2015-2025 NASK. All rights reserved.

from typing import Union
from urllib.parse import unquote


def ascii_str(obj):

    r"""
    Safely convert the given object to an ASCII-only :class:`str`.

    This function does its best to obtain a string representation
    (possibly :class:`str`-like or :class:`bytes`-like converted to str,
    though :func:`repr` can also be used as the last-resort fallback)
    and then escaping any non-ASCII characters -- *not raising* any
    encoding/decoding exceptions.

    >>> ascii_str('')
    ''
    >>> ascii_str(b'')
    ''
    >>> ascii_str('http://example.com/?q=1')   # pure ASCII str => unchanged
    'http://example.com/?q=1'
    >>> ascii_str('http://b\xfccher.example/')  # non-pure-ASCII-str => escaped
    'http://b\\xfccher.example/'
    >>> ascii_str(b'http://b\xc3\xbccher.example/')  # UTF-8 bytes => decoded + escaped
    'http://b\\xfccher.example/'
    >>> ascii_str(b'\xee\xdd')  # non-UTF-8 bytes => surrogate-escaped
    '\\udcee\\udcdd'
    >>> ascii_str(42)
    '42'

    >>> class Nasty(object):
    ...     def __str__(self): raise UnicodeError
    ...     def __repr__(self): return u'quite nasŧy'
    ...
    >>> ascii_str(Nasty())
    'quite nas\\u0167y'
    """
    if isinstance(obj, str):
        s = obj
    else:
        if isinstance(obj, memoryview):
            obj = bytes(obj)
        if isinstance(obj, (bytes, bytearray)):
            s = obj.decode('utf-8', 'surrogateescape')
        else:
            try:
                s = str(obj)
            except ValueError:
                s = repr(obj)
    return s.encode('ascii', 'backslashreplace').decode('ascii')


def as_unicode(obj, decode_error_handling='strict'):
    r"""
    Convert the given object to a :class:`str`.

    >>> as_unicode('ftp://example.org')
    'ftp://example.org'
    >>> as_unicode(b'ftp://example.org')
    'ftp://example.org'
    >>> as_unicode(bytearray(b'ftp://\xc5\x82.example.org'))
    'ftp://ł.example.org'
    >>> as_unicode(b'\xdd', 'surrogateescape')
    '\udcdd'
    >>> as_unicode(1234)
    '1234'

    >>> as_unicode(b'\xdd')    # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    UnicodeDecodeError: ...
    """
    if isinstance(obj, memoryview):
        obj = bytes(obj)
    if isinstance(obj, (bytes, bytearray)):
        return obj.decode('utf-8', decode_error_handling)
    return str(obj)


def str_to_bool(s):
    """
    Return True or False, given one of the known strings (see examples below).

    >>> str_to_bool('1')
    True
    >>> str_to_bool('yes')
    True
    >>> str_to_bool('Yes')  # note: checks are case-insensitive
    True
    >>> str_to_bool('on')
    True

    >>> str_to_bool('0')
    False
    >>> str_to_bool('nO')
    False
    >>> str_to_bool('off')
    False

    Other string values cause ValueError:

    >>> str_to_bool('unknown')        # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    ValueError: ...
    >>> str_to_bool('')               # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    ValueError: ...

    Non-str values cause TypeError:

    >>> str_to_bool(True)             # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    TypeError: ...
    """
    if not isinstance(s, str):
        raise TypeError('{!a} is not a str'.format(s))
    s_lowercased = s.lower()
    try:
        return str_to_bool.LOWERCASE_TO_BOOL[s_lowercased]
    except KeyError:
        raise ValueError(str_to_bool.PUBLIC_MESSAGE_PATTERN.format(
            ascii_str(s)).rstrip('.')) from None

str_to_bool.LOWERCASE_TO_BOOL = {
    '1': True,
    'y': True,
    'yes': True,
    't': True,
    'true': True,
    'on': True,

    '0': False,
    'n': False,
    'no': False,
    'f': False,
    'false': False,
    'off': False,
}

str_to_bool.PUBLIC_MESSAGE_PATTERN = (
    '"{}" is not a valid YES/NO flag (expected one of: %s; or a '
    'variant of any of them with some letters upper-cased).' % (
        ', '.join('"{}"'.format(k) for k, v in sorted(
            str_to_bool.LOWERCASE_TO_BOOL.items(),
            key=lambda item: (item[1], item[0])))))


def idna_to_ascii(domain: str) -> str:
    r"""
    Convert the given domain to its ASCII-compatible form (labels
    containing non-ASCII characters are IDNA-encoded; pure-ASCII
    labels are left intact).

    >>> idna_to_ascii('example.com')
    'example.com'
    >>> idna_to_ascii('Example.COM')
    'Example.COM'
    >>> idna_to_ascii('b\xfccher.example')
    'xn--bcher-kva.example'
    >>> idna_to_ascii('www.b\xfccher.example.')
    'www.xn--bcher-kva.example.'

    Raises :exc:`UnicodeError` (a :exc:`ValueError` subclass) if the
    domain cannot be converted:

    >>> try:
    ...     idna_to_ascii('a..example.com')
    ... except UnicodeError:
    ...     print('empty label')
    ...
    empty label
    """
    return domain.encode('idna').decode('ascii')


def percent_decode_utf8(s: Union[str, bytes, bytearray]) -> str:
    r"""
    Percent-decode the given string, interpreting the decoded octets
    as UTF-8.

    >>> percent_decode_utf8('example.com')
    'example.com'
    >>> percent_decode_utf8('%65xample.com')
    'example.com'
    >>> percent_decode_utf8('b%C3%BCcher.example')
    'bücher.example'
    >>> percent_decode_utf8(b'b%C3%BCcher.example')
    'bücher.example'
    >>> percent_decode_utf8('100%')   # (not a valid percent-encoded octet => left intact)
    '100%'

    Raises :exc:`UnicodeDecodeError` (a :exc:`ValueError` subclass) if
    the decoded octets are not valid UTF-8:

    >>> percent_decode_utf8('%C3')    # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    UnicodeDecodeError: ...
    """
    s = as_unicode(s)
    return unquote(s, encoding='utf-8', errors='strict')
