# Copyright (c) 2015-2025 NASK. All rights reserved.

"""
Building URL filters from INI-like configuration files.

An example configuration section:

    [url_filter]
    schemes = http, https, mailto
    rel_scheme = yes
    hostnames = example.com, 127.0.0.1
    subdomain = yes
    ; dotted names of importable callables (optional):
    abs_callback = mypackage.mymodule.on_match
"""

import configparser
import dataclasses
from importlib import import_module
from typing import (
    Callable,
    Mapping,
    Optional,
    Tuple,
)

from urlfilters.encoding_helpers import (
    ascii_str,
    str_to_bool,
)
from urlfilters.exceptions import ConfigError
from urlfilters.log_helpers import get_logger
from urlfilters.url_filter import (
    URLFilter,
    make_url_filter,
)


LOGGER = get_logger(__name__)


DEFAULT_SECTION_NAME = 'url_filter'


def import_by_dotted_name(dotted_name):
    """
    Import an object specified by the given `dotted_name`.

    >>> obj = import_by_dotted_name('urlfilters.url_filter.make_url_filter')
    >>> obj is make_url_filter
    True

    >>> import_by_dotted_name('urlfilters.url_filter.NonExistentObj'
    ...                       )  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    ImportError: ...
    """
    all_name_parts = dotted_name.split('.')
    importable_name = all_name_parts[0]
    obj = import_module(importable_name)
    for part in all_name_parts[1:]:
        importable_name += '.{}'.format(part)
        try:
            obj = getattr(obj, part)
        except AttributeError:
            try:
                import_module(importable_name)
            except ModuleNotFoundError as exc:
                raise ImportError(
                    'cannot import {!a}'.format(importable_name),
                    name=exc.name, path=exc.path) from None
            obj = getattr(obj, part)
    return obj


#
# Option value converters

def make_list_converter(item_converter, name=None, delimiter=','):
    """
    >>> conv = make_list_converter(str)
    >>> conv(' http,  https , mailto, ')
    ['http', 'https', 'mailto']
    >>> conv('  ')
    []
    """

    def converter(s):
        s = s.strip()
        if s.endswith(delimiter):
            # remove trailing delimiter
            s = s[:-len(delimiter)].rstrip()
        if s:
            return [item_converter(item.strip())
                    for item in s.split(delimiter)]
        else:
            return []

    if name is None:
        name = '__{0}__list__converter'.format(item_converter.__name__)
    converter.__name__ = name
    converter.item_converter = item_converter
    converter.delimiter = delimiter
    return converter


def callback_converter(s):
    """
    >>> callback_converter('') is None
    True
    >>> callback_converter('  urlfilters.url_filter.make_url_filter ') is make_url_filter
    True
    >>> callback_converter('urlfilters.const.UNSAFE_PREFIX')  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    TypeError: ...
    """
    s = s.strip()
    if not s:
        return None
    obj = import_by_dotted_name(s)
    if not callable(obj):
        raise TypeError('{!a} is not callable'.format(s))
    return obj


BASIC_CONVERTERS = {
    'bool': str_to_bool,
    'list_of_str': make_list_converter(str, 'list_of_str'),
    'callback': callback_converter,
}


#
# The actual configuration stuff

@dataclasses.dataclass(frozen=True)
class URLFilterConfig:

    """
    The URL filter configuration (the fields correspond to the keyword
    arguments of :func:`urlfilters.url_filter.make_url_filter`).

    >>> config = URLFilterConfig.from_config_section({
    ...     'schemes': 'http, https, mailto',
    ...     'hostnames': 'Example.com, 0x7f.1,',
    ...     'subdomain': 'Yes',
    ... })
    >>> config.schemes
    ('http', 'https', 'mailto')
    >>> config.hostnames
    ('Example.com', '0x7f.1')
    >>> config.subdomain
    True
    >>> config.rel_path
    False
    >>> url_filter = config.make_url_filter()
    >>> url_filter('mailto:someone@example.com')
    'mailto:someone@example.com'
    >>> url_filter('http://www.example.com/')
    'http://www.example.com/'
    >>> url_filter('http://0x7f000001/')
    'http://0x7f000001/'
    >>> url_filter('http://www.example.org/')
    'unsafe:http://www.example.org/'
    """

    schemes: Optional[Tuple[str, ...]] = None
    rel_scheme: bool = False
    hostnames: Optional[Tuple[str, ...]] = None
    subdomain: bool = False
    rel_path: bool = False
    rel_path_only: bool = False
    img_data_uris: bool = False
    idna_to_ascii: bool = False
    host_parsing: bool = False
    abs_callback: Optional[Callable] = None
    rel_callback: Optional[Callable] = None
    unsafe_callback: Optional[Callable] = None

    #: option name -> converter spec (see :data:`BASIC_CONVERTERS`)
    OPTION_CONVERTER_SPECS = {
        'schemes': 'list_of_str',
        'rel_scheme': 'bool',
        'hostnames': 'list_of_str',
        'subdomain': 'bool',
        'rel_path': 'bool',
        'rel_path_only': 'bool',
        'img_data_uris': 'bool',
        'idna_to_ascii': 'bool',
        'host_parsing': 'bool',
        'abs_callback': 'callback',
        'rel_callback': 'callback',
        'unsafe_callback': 'callback',
    }

    @classmethod
    def from_config_section(cls, section: Mapping[str, str]) -> 'URLFilterConfig':
        """
        Make an instance from a mapping of raw (str) option values
        (e.g., a :class:`configparser.SectionProxy`).

        Raises:
            :exc:`~urlfilters.exceptions.ConfigError` if any option is
            unknown or its value cannot be converted.
        """
        unknown = sorted(set(section).difference(cls.OPTION_CONVERTER_SPECS))
        if unknown:
            raise ConfigError('illegal config options: {}'.format(
                ', '.join(map(ascii_str, unknown))))
        kwargs = {}
        for opt_name, opt_value in section.items():
            converter = BASIC_CONVERTERS[cls.OPTION_CONVERTER_SPECS[opt_name]]
            try:
                value = converter(opt_value)
            except Exception as exc:
                raise ConfigError('error when converting option {!a} (raw value: {!a}): '
                                  '{}'.format(opt_name, opt_value, ascii_str(exc))) from exc
            if isinstance(value, list):
                # (empty list means "not given")
                value = tuple(value) or None
            kwargs[opt_name] = value
        return cls(**kwargs)

    def make_url_filter(self) -> URLFilter:
        return make_url_filter(**{
            field.name: getattr(self, field.name)
            for field in dataclasses.fields(self)})


def load_url_filter_config(path, section=DEFAULT_SECTION_NAME) -> URLFilterConfig:
    """
    Read the given configuration file and make a
    :class:`URLFilterConfig` from the given section.

    Raises:
        :exc:`~urlfilters.exceptions.ConfigError` if the file cannot be
        read or parsed, if the section is missing, or if any of the
        options is illegal.
    """
    config_parser = configparser.ConfigParser(interpolation=None)
    try:
        ok_config_files = config_parser.read([path], encoding='utf-8')
    except (configparser.Error, UnicodeDecodeError) as exc:
        raise ConfigError('cannot parse config file "{}": {}'.format(
            ascii_str(path), ascii_str(exc))) from exc
    if not ok_config_files:
        raise ConfigError('config file "{}" could not be read'.format(ascii_str(path)))
    if not config_parser.has_section(section):
        raise ConfigError('missing config section "{}" (in file "{}")'.format(
            ascii_str(section), ascii_str(path)))
    LOGGER.info('Config file read properly: "%s"', ascii_str(path))
    return URLFilterConfig.from_config_section(config_parser[section])
