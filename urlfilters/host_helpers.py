# Copyright (c) 2015-2025 NASK. All rights reserved.

"""
Host parsing and IPv4 address canonicalization.

The algorithms follow https://url.spec.whatwg.org/#host-parsing and
https://url.spec.whatwg.org/#concept-ipv4-parser -- except that:

* IPv6 addresses (in square brackets) are only recognized, *not*
  parsed/validated/canonicalized;
* the space character is accepted in hosts (as browsers do).

Failing to canonicalize equivalent IPv4 representations (such as
``0x7f.1`` and ``127.0.0.1``) is a classic whitelist-bypass vector.
"""

import ipaddress
from typing import Optional

from urlfilters.encoding_helpers import (
    idna_to_ascii as _idna_to_ascii,
    percent_decode_utf8,
)
from urlfilters.exceptions import IPv4ParsingError
from urlfilters.regexes import (
    HOST_INVALID_CHAR_REGEX,
    IPv4_PART_DECIMAL_REGEX,
    IPv4_PART_HEX_REGEX,
    IPv4_PART_OCTAL_REGEX,
)


# (the greatest value a valid IPv4 address can be parsed to; it wraps
# around to `0.0.0.0` when serialized)
MAX_IPV4_ADDRESS = 256 ** 4

_MAX_IPV4_DECIMAL_DIGITS = len(str(MAX_IPV4_ADDRESS))


def parse_host(input: str, *, idna_to_ascii: bool = False) -> Optional[str]:
    """
    Parse the given host, returning its canonical form or :obj:`None`
    (meaning *failure*).

    >>> parse_host('example.com')
    'example.com'
    >>> parse_host('ex%41mple.com')
    'exAmple.com'
    >>> parse_host('b%C3%BCcher.example', idna_to_ascii=True)
    'xn--bcher-kva.example'
    >>> parse_host('with space.example.com')
    'with space.example.com'

    IPv4 addresses (in any notation) are canonicalized:

    >>> parse_host('0x7f.1')
    '127.0.0.1'
    >>> parse_host('0300.0250.0.01')
    '192.168.0.1'
    >>> parse_host('3232235521')
    '192.168.0.1'
    >>> parse_host('127.0.0.1.')
    '127.0.0.1'

    IPv6 addresses are passed through:

    >>> parse_host('[::1]')
    '[::1]'

    Failures:

    >>> parse_host('[::1') is None
    True
    >>> parse_host('exa%2Fmple.com') is None
    True
    >>> parse_host('user@example.com') is None
    True
    >>> parse_host('%C3') is None
    True
    >>> parse_host('a..example.com', idna_to_ascii=True) is None
    True
    >>> parse_host('256.0.0.1') is None
    True
    >>> parse_host('') is None
    True
    """
    if input.startswith('['):
        if not input.endswith(']'):
            return None
        # IPv6 literals are recognized, not parsed
        return input
    try:
        # "Let domain be the result of UTF-8 decode without BOM
        # on the percent-decoding of UTF-8 encode on input."
        domain = percent_decode_utf8(input)
        if idna_to_ascii:
            domain = _idna_to_ascii(domain)
    except ValueError:
        return None
    if not domain or HOST_INVALID_CHAR_REGEX.search(domain):
        return None
    return parse_ipv4_and_serialize(domain)


def parse_ipv4_and_serialize(input: str) -> Optional[str]:
    """
    Return: the canonical (dotted-decimal) form of the given IPv4
    address, or the given string intact if it does not look like an
    IPv4 address, or :obj:`None` if it looks like an IPv4 address but
    is not a valid one.

    >>> parse_ipv4_and_serialize('127.0.0.1')
    '127.0.0.1'
    >>> parse_ipv4_and_serialize('0x7F.0.0.1')
    '127.0.0.1'
    >>> parse_ipv4_and_serialize('example.com')
    'example.com'
    >>> parse_ipv4_and_serialize('1.2.3.4.5')
    '1.2.3.4.5'
    >>> parse_ipv4_and_serialize('1.256.3.4') is None
    True
    """
    try:
        address = parse_ipv4(input)
    except IPv4ParsingError:
        return None
    if address is None:
        return input
    return serialize_ipv4(address)


def parse_ipv4(input: str) -> Optional[int]:
    """
    Parse the given string as an IPv4 address.

    Returns the address (an :class:`int`), or :obj:`None` if the string
    does not look like an IPv4 address at all.

    Raises :exc:`~urlfilters.exceptions.IPv4ParsingError` if the string
    looks like an IPv4 address but it is not a valid one.

    >>> parse_ipv4('127.0.0.1')
    2130706433
    >>> parse_ipv4('0x7f.1')
    2130706433
    >>> parse_ipv4('0177.0.0.1')
    2130706433
    >>> parse_ipv4('127.1')
    2130706433
    >>> parse_ipv4('127.0.1')
    2130706433
    >>> parse_ipv4('2130706433')
    2130706433
    >>> parse_ipv4('0x')
    0
    >>> parse_ipv4('1.2.3.4.') == parse_ipv4('1.2.3.4')
    True

    The last part may be equal to the limit for its position (the
    value then carries over into the preceding octet):

    >>> parse_ipv4('1.2.3.256') == parse_ipv4('1.2.4.0')
    True
    >>> parse_ipv4('4294967296')
    4294967296

    Not an IPv4 address:

    >>> parse_ipv4('example.com') is None
    True
    >>> parse_ipv4('1.2.3.4.5') is None
    True
    >>> parse_ipv4('1..2.3') is None
    True
    >>> parse_ipv4('0..0x300') is None
    True
    >>> parse_ipv4('09.1.1.1') is None     # (not a valid octal number)
    True
    >>> parse_ipv4('0xg.1.1.1') is None
    True

    Looks like an IPv4 address, but is invalid:

    >>> parse_ipv4('256.0.0.1')           # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    urlfilters.exceptions.IPv4ParsingError: ...
    >>> parse_ipv4('0x100.0.0.1')         # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    urlfilters.exceptions.IPv4ParsingError: ...
    >>> parse_ipv4('1.2.65537')           # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    urlfilters.exceptions.IPv4ParsingError: ...
    >>> parse_ipv4('4294967297')          # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    urlfilters.exceptions.IPv4ParsingError: ...
    """
    parts = input.split('.')
    if parts[-1] == '':
        # (a trailing dot is just a syntax violation)
        del parts[-1]
    if not parts or len(parts) > 4:
        return None
    numbers = []
    for part in parts:
        # (e.g., `0..0x300` is a domain, not an IPv4 address)
        if part == '':
            return None
        n = parse_ipv4_number(part)
        if n is None:
            return None
        numbers.append(n)

    # Note: the *parsed* numbers are validated here (*not* the raw
    # parts), so that hexadecimal and octal parts are treated exactly
    # in the same way as decimal ones.
    for n in numbers[:-1]:
        if n > 255:
            raise IPv4ParsingError(
                '{!a}: some of the non-last parts is greater '
                'than 255'.format(input))
    last_limit = 256 ** (5 - len(numbers))
    if numbers[-1] > last_limit:
        raise IPv4ParsingError(
            '{!a}: the last part is greater '
            'than {}'.format(input, last_limit))

    address = numbers[-1]
    for i, n in enumerate(numbers[:-1]):
        address += n * 256 ** (3 - i)
    return address


def parse_ipv4_number(part: str) -> Optional[int]:
    """
    Parse a part of an IPv4 address (decimal, octal if prefixed with
    `0`, or hexadecimal if prefixed with `0x` or `0X`).  Return
    :obj:`None` if the part is not a number in any of these notations.

    >>> parse_ipv4_number('42')
    42
    >>> parse_ipv4_number('0')
    0
    >>> parse_ipv4_number('052')
    42
    >>> parse_ipv4_number('0x2a')
    42
    >>> parse_ipv4_number('0X2A')
    42
    >>> parse_ipv4_number('0x')
    0
    >>> parse_ipv4_number('08') is None
    True
    >>> parse_ipv4_number('42a') is None
    True
    >>> parse_ipv4_number('-1') is None
    True
    """
    if IPv4_PART_HEX_REGEX.search(part):
        digits = part[2:]
        return int(digits, 16) if digits else 0
    if len(part) > 1 and part.startswith('0'):
        if IPv4_PART_OCTAL_REGEX.search(part):
            return int(part[1:], 8)
        return None
    if IPv4_PART_DECIMAL_REGEX.search(part):
        if len(part) > _MAX_IPV4_DECIMAL_DIGITS:
            # (too big anyway; also, we avoid the `int()`'s limit
            # on the number of digits of a decimal string)
            return MAX_IPV4_ADDRESS + 1
        return int(part)
    return None


def serialize_ipv4(address: int) -> str:
    """
    >>> serialize_ipv4(2130706433)
    '127.0.0.1'
    >>> serialize_ipv4(0)
    '0.0.0.0'
    >>> serialize_ipv4(4294967295)
    '255.255.255.255'
    >>> serialize_ipv4(4294967296)
    '0.0.0.0'
    """
    return str(ipaddress.IPv4Address(address % 256 ** 4))
