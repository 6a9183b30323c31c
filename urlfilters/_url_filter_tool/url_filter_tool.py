#!/usr/bin/env python

# Copyright (c) 2015-2025 NASK. All rights reserved.

"""
This tool is a part of *urlfilters*.  It builds a URL filter from a
configuration file and filters the given URLs (or the lines read from
the standard input), printing the results one per line.
"""

import argparse
import logging
import sys
from importlib import resources

from urlfilters.config import (
    DEFAULT_SECTION_NAME,
    URLFilterConfig,
    load_url_filter_config,
)
from urlfilters.exceptions import (
    ConfigError,
    URLFilterConfigError,
)
from urlfilters.log_helpers import (
    configure_logging,
    get_logger,
)


LOGGER = get_logger(__name__)

CONFIG_ERROR_EXIT_STATUS = 2


def iter_config_base_lines():
    text = (resources.files('urlfilters._url_filter_tool')
            .joinpath('config_base.ini')
            .read_text(encoding='utf-8'))
    yield from text.splitlines()


def iter_input_urls(args_urls, stdin):
    if args_urls:
        yield from args_urls
    else:
        for line in stdin:
            yield line.rstrip('\r\n')


def format_verbose(classification):
    verdict, url, parts = classification
    line = '{}\t{}'.format(verdict, url)
    if parts is not None:
        line += '\t' + ' '.join(
            '{}={!r}'.format(name, value)
            for name, value in parts._asdict().items()
            if name != 'url')
    return line


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog='urlfilters-check',
        description='Filter URLs using a whitelist-based URL filter.')
    parser.add_argument(
        '--generate-config',
        action='store_true',
        help='generate the config file template, then exit')
    parser.add_argument(
        '-c', '--config',
        help='build the URL filter using the specified config file '
             '(if not given, the default configuration is used)')
    parser.add_argument(
        '--section',
        default=DEFAULT_SECTION_NAME,
        help='the config section to be used (default: %(default)s)')
    parser.add_argument(
        '--log-config',
        help='the logging configuration file to be used')
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='be more descriptive (print the verdict and URL parts)')
    parser.add_argument(
        'urls',
        nargs='*',
        metavar='URL',
        help='URL(s) to be filtered (if none given, '
             'each line of the standard input is used)')
    return parser.parse_args(argv)


def main(argv=None, stdin=None, stdout=None, stderr=None):
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr
    args = parse_arguments(argv)

    if args.generate_config:
        for line in iter_config_base_lines():
            print(line, file=stdout)
        return 0

    try:
        configure_logging(args.log_config,
                          level=(logging.DEBUG if args.verbose else logging.WARNING))
        if args.config:
            config = load_url_filter_config(args.config, args.section)
        else:
            config = URLFilterConfig()
        url_filter = config.make_url_filter()
    except (ConfigError, URLFilterConfigError, RuntimeError) as exc:
        LOGGER.debug('could not build the URL filter', exc_info=True)
        print('FATAL ERROR: {}'.format(exc), file=stderr)
        return CONFIG_ERROR_EXIT_STATUS

    for url in iter_input_urls(args.urls, stdin):
        if args.verbose:
            print(format_verbose(url_filter.classify(url)), file=stdout)
        else:
            print(url_filter(url), file=stdout)
    return 0


if __name__ == '__main__':
    sys.exit(main())
