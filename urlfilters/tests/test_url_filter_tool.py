# Copyright (c) 2015-2025 NASK. All rights reserved.

import io
import logging
import os.path
import shutil
import tempfile
import unittest
from unittest.mock import (
    call,
    patch,
)

from unittest_expander import (
    expand,
    foreach,
    param,
)

from urlfilters._url_filter_tool.url_filter_tool import (
    CONFIG_ERROR_EXIT_STATUS,
    format_verbose,
    iter_input_urls,
    main,
)
from urlfilters.config import (
    URLFilterConfig,
    load_url_filter_config,
)
from urlfilters.url_filter import (
    Classification,
    URLParts,
)


@expand
class Test_main(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp_dir)
        patcher = patch('urlfilters._url_filter_tool.url_filter_tool.configure_logging')
        self.configure_logging_mock = patcher.start()
        self.addCleanup(patcher.stop)
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()

    def _write_config(self, content):
        path = os.path.join(self.tmp_dir, 'urlfilters.ini')
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def _run(self, argv, stdin_content=''):
        return main(argv,
                    stdin=io.StringIO(stdin_content),
                    stdout=self.stdout,
                    stderr=self.stderr)

    def test_generate_config(self):
        exit_status = self._run(['--generate-config'])
        self.assertEqual(exit_status, 0)
        output = self.stdout.getvalue()
        self.assertIn('\n[url_filter]\n', output)
        self.assertEqual(self.configure_logging_mock.mock_calls, [])
        # the generated template is a valid config file
        config = load_url_filter_config(self._write_config(output))
        self.assertEqual(config, URLFilterConfig(schemes=('http', 'https')))

    def test_urls_from_args(self):
        exit_status = self._run(['http://example.com/', ' javascript:alert(1)'],
                                stdin_content='https://ignored.example.com/\n')
        self.assertEqual(exit_status, 0)
        self.assertEqual(self.stdout.getvalue(),
                         'http://example.com/\n'
                         'unsafe:javascript:alert(1)\n')
        self.assertEqual(self.stderr.getvalue(), '')
        self.assertEqual(self.configure_logging_mock.mock_calls, [
            call(None, level=logging.WARNING),
        ])

    def test_urls_from_stdin(self):
        exit_status = self._run([], stdin_content=(
            'http://example.com/\r\n'
            '//example.com/\n'
            '\n'
            'https://example.com/x '))
        self.assertEqual(exit_status, 0)
        self.assertEqual(self.stdout.getvalue(),
                         'http://example.com/\n'
                         'unsafe://example.com/\n'
                         'unsafe:\n'
                         'https://example.com/x \n')

    def test_with_config(self):
        path = self._write_config(
            '[url_filter]\n'
            'hostnames = example.com\n'
            'subdomain = yes\n'
            'rel_path = yes\n')
        exit_status = self._run(['-c', path,
                                 'https://www.example.com/',
                                 'https://www.example.org/',
                                 'foo/bar'])
        self.assertEqual(exit_status, 0)
        self.assertEqual(self.stdout.getvalue(),
                         'https://www.example.com/\n'
                         'unsafe:https://www.example.org/\n'
                         'foo/bar\n')

    def test_with_config_section(self):
        path = self._write_config(
            '[url_filter]\n'
            'schemes = https\n'
            '\n'
            '[ftp_only]\n'
            'schemes = ftp\n')
        exit_status = self._run(['--config', path, '--section', 'ftp_only',
                                 'ftp://example.com/', 'https://example.com/'])
        self.assertEqual(exit_status, 0)
        self.assertEqual(self.stdout.getvalue(),
                         'ftp://example.com/\n'
                         'unsafe:https://example.com/\n')

    def test_verbose(self):
        path = self._write_config(
            '[url_filter]\n'
            'hostnames = example.com\n')
        exit_status = self._run(['-v', '-c', path,
                                 'HTTPS://Example.com:443/p',
                                 'javascript:alert(1)'])
        self.assertEqual(exit_status, 0)
        self.assertEqual(self.stdout.getvalue(),
                         "absolute\tHTTPS://Example.com:443/p\t"
                         "scheme='https' authority='' host='example.com' port='' path='/p'\n"
                         "unsafe\tjavascript:alert(1)\n")
        self.assertEqual(self.configure_logging_mock.mock_calls, [
            call(None, level=logging.DEBUG),
        ])

    def test_log_config(self):
        self._run(['--log-config', '/some/logging.conf', 'http://example.com/'])
        self.assertEqual(self.configure_logging_mock.mock_calls, [
            call('/some/logging.conf', level=logging.WARNING),
        ])

    @foreach(
        param('[url_filter]\nhostnames = exa/mple.com\n',
              expected_msg="FATAL ERROR: 'exa/mple.com' is an invalid hostname\n"),
        param('[url_filter]\nschemes = ht!tp\n',
              expected_msg="FATAL ERROR: 'ht!tp' is an invalid scheme\n"),
        param('[url_filter]\nsubdomain = maybe\n',
              expected_msg='FATAL ERROR: [configuration-related error] '),
        param('[url_filter]\nsubdomains = yes\n',
              expected_msg='FATAL ERROR: [configuration-related error] '),
        param('[other]\nsubdomain = yes\n',
              expected_msg='FATAL ERROR: [configuration-related error] '),
    )
    def test_config_error(self, config_content, expected_msg):
        path = self._write_config(config_content)
        exit_status = self._run(['-c', path, 'http://example.com/'])
        self.assertEqual(exit_status, CONFIG_ERROR_EXIT_STATUS)
        self.assertEqual(self.stdout.getvalue(), '')
        self.assertTrue(self.stderr.getvalue().startswith(expected_msg))

    def test_missing_config_file(self):
        path = os.path.join(self.tmp_dir, 'no_such_file.ini')
        exit_status = self._run(['-c', path, 'http://example.com/'])
        self.assertEqual(exit_status, CONFIG_ERROR_EXIT_STATUS)
        self.assertTrue(self.stderr.getvalue().startswith(
            'FATAL ERROR: [configuration-related error] '))

    def test_logging_config_error(self):
        self.configure_logging_mock.side_effect = RuntimeError('cannot configure logging')
        exit_status = self._run(['http://example.com/'])
        self.assertEqual(exit_status, CONFIG_ERROR_EXIT_STATUS)
        self.assertEqual(self.stdout.getvalue(), '')
        self.assertEqual(self.stderr.getvalue(), 'FATAL ERROR: cannot configure logging\n')


class Test_iter_input_urls(unittest.TestCase):

    def test_args_take_precedence(self):
        stdin = io.StringIO('b\n')
        self.assertEqual(list(iter_input_urls(['a'], stdin)), ['a'])

    def test_stdin_lines(self):
        stdin = io.StringIO('a\r\n b \n\nc')
        self.assertEqual(list(iter_input_urls([], stdin)), ['a', ' b ', '', 'c'])


class Test_format_verbose(unittest.TestCase):

    def test_without_parts(self):
        self.assertEqual(format_verbose(Classification('relative', 'foo')), 'relative\tfoo')

    def test_with_parts(self):
        parts = URLParts('mailto:x@example.com', 'mailto', '', '', '', 'x@example.com')
        self.assertEqual(
            format_verbose(Classification('absolute', parts.url, parts)),
            "absolute\tmailto:x@example.com\t"
            "scheme='mailto' authority='' host='' port='' path='x@example.com'")
