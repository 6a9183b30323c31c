# Copyright (c) 2015-2025 NASK. All rights reserved.

import collections
import functools
import logging
import logging.config
import os.path
import sys
import time
import traceback

from urlfilters.const import TOPLEVEL_PACKAGE_NAME


DEFAULT_LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def get_logger(name=None):
    """
    Get a logger, like :func:`logging.getLogger` does, except that the
    ``'__main__'`` name is replaced with a dotted name derived from the
    path of the script being run (see: :func:`script_path_to_logger_name`).
    """
    if name == '__main__':
        name = script_path_to_logger_name(_get_main_script_path())
    return logging.getLogger(name)


def script_path_to_logger_name(script_path):
    """
    Derive a dotted logger name from the given script path. Only the
    trailing path segments are taken: up to the `urlfilters` package
    directory (inclusive) if the path goes through it, or up to the
    path's beginning otherwise.

    >>> script_path_to_logger_name('/opt/urlfilters/_url_filter_tool/url_filter_tool.py')
    'urlfilters._url_filter_tool.url_filter_tool'
    >>> script_path_to_logger_name('/some/script.py')
    'some.script'
    >>> script_path_to_logger_name('../script.py')
    'DD.script'
    """
    segments = collections.deque()
    head = os.path.splitext(script_path)[0]
    while True:
        head, segment = os.path.split(head)
        # (dots would add bogus logger hierarchy levels, e.g., for `..`)
        segments.appendleft(segment.replace('.', 'D'))
        if segment == TOPLEVEL_PACKAGE_NAME or not head.strip('/'):
            return '.'.join(segments)


def _get_main_script_path():
    main_module = sys.modules['__main__']
    return getattr(main_module, '__file__', None) or sys.argv[0]


_LOGGER = get_logger(__name__)


class UTCFormatter(logging.Formatter):

    """
    A formatter that *always* uses UTC time (with the ' UTC' suffix
    added to the default timestamp format).

    >>> formatter = UTCFormatter('%(asctime)s %(message)s')
    >>> record = logging.LogRecord('mylog', 10, '/', 997, 'Hello!', (), None)
    >>> record.created = 0.0
    >>> record.msecs = 0.0
    >>> formatter.format(record)
    '1970-01-01 00:00:00,000 UTC Hello!'
    """

    converter = time.gmtime

    @functools.wraps(logging.Formatter.formatTime)
    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        if datefmt:
            return time.strftime(datefmt, ct)
        t = time.strftime('%Y-%m-%d %H:%M:%S', ct)
        return '%s,%03d UTC' % (t, record.msecs)


def configure_logging(config_path=None, level=logging.WARNING):
    """
    Configure logging.

    Args/kwargs:
        `config_path` (str or None; default: None):
            Path of a logging configuration file, in the format
            accepted by :func:`logging.config.fileConfig`.  If not
            given, a simple configuration is applied: records are
            emitted to the standard error stream, with UTC timestamps.
        `level` (int or str; default: logging.WARNING):
            The root logger level for the simple configuration (ignored
            if `config_path` is given).

    Raises:
        :exc:`RuntimeError` if the configuration file cannot be read
        or applied.
    """
    if config_path is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(UTCFormatter(DEFAULT_LOG_FORMAT))
        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
        return
    try:
        with open(config_path, encoding='utf-8'):
            pass
    except OSError as exc:
        raise RuntimeError('logging configuration not loaded: could '
                           'not open the file {!a} ({})'.format(config_path, exc)) from exc
    try:
        logging.config.fileConfig(config_path, disable_existing_loggers=False)
    except Exception:
        raise RuntimeError('error while configuring logging, '
                           'using settings from configuration file {!a}:\n{}'
                           .format(config_path, traceback.format_exc())) from None
    _LOGGER.info('logging configuration loaded from %a', config_path)
