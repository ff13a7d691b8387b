
import os.path

from codecs import open
from setuptools import setup

import rtspprobe


here = os.path.abspath(os.path.dirname(__file__))
name = 'rtspprobe'
version = rtspprobe.VERSION

with open(os.path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()


setup(
    name=name,
    version=version,

    description='RTSP camera stream discovery',
    long_description=long_description,

    license='GPLv3',

    classifiers=[
        'Development Status :: 4 - Beta',

        'Intended Audience :: System Administrators',
        'Topic :: Multimedia :: Video',
        'Topic :: System :: Networking',

        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',

        'Programming Language :: Python :: 3',
    ],

    keywords='rtsp camera discovery scanner',

    packages=['rtspprobe', 'rtspprobe.utils'],

    python_requires='>=3.7',

    install_requires=['tornado>=5.1'],

    extras_require={
        'test': ['pytest'],
    },

    entry_points={
        'console_scripts': [
            'rtspprobectl=rtspprobe.probectl:main',
        ],
    },
)
