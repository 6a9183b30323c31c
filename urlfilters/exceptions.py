# Copyright (c) 2015-2025 NASK. All rights reserved.


#
# Filter construction errors

class URLFilterConfigError(TypeError):

    """
    The base class for exceptions raised when a URL filter cannot be
    constructed because of an invalid whitelist entry.

    It is a :exc:`TypeError` subclass (a whitelist entry of a wrong
    form is considered a programming error, not a runtime condition).

    Each instance exposes the offending entry as the :attr:`entry`
    attribute (for possible later inspection).

    >>> exc = URLFilterConfigError('foo\\tbar')
    >>> exc.entry
    'foo\\tbar'
    >>> print(exc)
    'foo\\tbar' is an invalid whitelist entry
    >>> isinstance(exc, TypeError)
    True
    """

    #: (overridable in subclasses)
    entry_description = 'whitelist entry'

    def __init__(self, entry, *args):
        self.entry = entry
        msg = '{!a} is an invalid {}'.format(entry, self.entry_description)
        super(URLFilterConfigError, self).__init__(msg, *args)


class InvalidSchemeError(URLFilterConfigError):

    """
    Raised when a scheme whitelist entry is not a valid scheme.

    >>> print(InvalidSchemeError('ht!tp'))
    'ht!tp' is an invalid scheme
    """

    entry_description = 'scheme'


class InvalidHostnameError(URLFilterConfigError):

    """
    Raised when a hostname whitelist entry is not a valid host.

    >>> print(InvalidHostnameError('exa/mple.com'))
    'exa/mple.com' is an invalid hostname
    """

    entry_description = 'hostname'


#
# Host parsing errors

class IPv4ParsingError(ValueError):

    """
    Raised when a host looks like an IPv4 address (in any of the
    notations accepted by browsers) but it cannot be a valid one
    (e.g., some of its parts is out of range).
    """


#
# Configuration (files) errors

class ConfigError(Exception):

    """
    A generic, configuration-related, exception class.

    >>> print(ConfigError('Some Message'))
    [configuration-related error] Some Message

    >>> print(ConfigError('Some arg', 42, 'Yet another arg'))
    [configuration-related error] ('Some arg', 42, 'Yet another arg')
    """

    def __str__(self):
        return '[configuration-related error] ' + super().__str__()
