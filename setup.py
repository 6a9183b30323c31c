# Copyright (c) 2015-2025 NASK. All rights reserved.

import glob
import os.path as osp
import sys

from setuptools import setup, find_packages


setup_dir, setup_filename = osp.split(osp.abspath(__file__))
setup_human_readable_ref = osp.join(osp.basename(setup_dir), setup_filename)

def get_urlfilters_version(filename_base):
    path_base = osp.join(setup_dir, filename_base)
    path_glob_pattern = path_base + '*'
    # The non-suffixed path variant should be
    # tried only if another one does not exist.
    matching_paths = sorted(glob.iglob(path_glob_pattern),
                            reverse=True)
    try:
        path = matching_paths[0]
    except IndexError:
        sys.exit('[{}] Cannot determine the urlfilters version '
                 '(no files match the pattern {!a}).'
                 .format(setup_human_readable_ref,
                         path_glob_pattern))
    try:
        with open(path, encoding='ascii') as f:
            return f.read().strip()
    except (OSError, UnicodeError) as exc:
        sys.exit('[{}] Cannot determine the urlfilters version '
                 '(an error occurred when trying to '
                 'read it from the file {!a} - {}).'
                 .format(setup_human_readable_ref,
                         path,
                         exc))


urlfilters_version = get_urlfilters_version('.urlfilters-version')

test_requirements = [
    'pytest>=7.1.2',
    'unittest_expander>=0.4.4',
]


setup(
    name="urlfilters",
    version=urlfilters_version,

    packages=find_packages(include=['urlfilters', 'urlfilters.*']),
    install_requires=[],
    extras_require={
        'test': test_requirements,
    },
    python_requires='>=3.9',
    include_package_data=True,
    package_data={
        'urlfilters._url_filter_tool': ['config_base.ini'],
    },
    zip_safe=False,
    entry_points={
        'console_scripts': [
            'urlfilters-check = urlfilters._url_filter_tool.url_filter_tool:main',
        ],
    },

    description='Whitelist-based URL filters (schemes, hosts, ports) '
                'for safe insertion of URLs into HTML attributes.',
    classifiers=[
        'Intended Audience :: Developers',
        'License :: OSI Approved :: GNU Affero General Public License v3',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Security',
        'Topic :: Software Development :: Libraries',
    ],
    keywords='url whitelist filter xss host ipv4 canonicalization',
)
