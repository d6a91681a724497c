#!/usr/bin/env python
# -*- encoding: utf-8 -*-

import pathlib

from setuptools import find_packages
from setuptools import setup

# The directory containing this file
HERE = pathlib.Path(__file__).parent

# The text of the README file
README = (HERE / "README.md").read_text()


setup(
    name='wright_stv',
    version='0.1.0',
    description='Tally BLT ballot files with Wright System STV',
    long_description=README,
    long_description_content_type="text/markdown",
    packages=find_packages('src'),
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        'Operating System :: Unix',
        'Operating System :: POSIX',
        'Operating System :: Microsoft :: Windows',
        'Programming Language :: Python :: 3',
        'Topic :: Utilities',
    ],
    keywords=[
        'stv', 'blt', 'ranked choice', 'election',
    ],
    python_requires='>=3.8',
    install_requires=[
        'tqdm>=4.56.0',
        'pandas>=1.2.0',
    ],
    extras_require={
        'test': [
            'pytest>=6.2.4',
        ],
    },
    entry_points={
        'console_scripts': [
            'wright-stv = wright_stv.cli:main',
        ]
    },
)
