#!/usr/bin/env python3

from setuptools import setup, find_packages

setup(
    name='bandcamp-catalog-import',
    version='1.0.0',
    description='Bandcamp storefront catalog importer - release metadata scraper, CLI and web form',
    author='Bandcamp Catalog Import',
    packages=find_packages(exclude=['tests', 'tests.*']),
    entry_points={
        'console_scripts': [
            'bc-import=bcimport.cli:main',
        ],
    },
    install_requires=[
        # HTTP client and web server
        'aiohttp>=3.9.0',

        # HTML parsing
        'beautifulsoup4>=4.11.0',
        'lxml>=4.9.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
            'pytest-asyncio>=0.21.0',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Environment :: Web Environment',
        'Intended Audience :: End Users/Desktop',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Multimedia :: Sound/Audio',
        'Topic :: Internet :: WWW/HTTP :: Indexing/Search',
    ],
    python_requires='>=3.9',
)
