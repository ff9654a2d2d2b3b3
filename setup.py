from os import path
from re import match, search, M, S
from setuptools import setup

with open(path.join('mw_section_client', '__init__.py'), 'r') as f:
    contents = f.read()
    longdesc = match('^"""(.*?)"""', contents, S).group(1)
    version = search(r'''^__version__\s*=\s*['"]([^'"]+)['"]''', contents, M).group(1)
    del contents

setup(
    name="mw-section-client",
    version=version,
    description="A MediaWiki client for bots that maintain page sections.",
    long_description=longdesc,
    long_description_content_type="text/x-rst",
    license="MIT",
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Internet :: WWW/HTTP :: Dynamic Content :: Wiki',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],
    keywords='mediawiki api requests bot',
    packages=["mw_section_client"],
    install_requires=['requests'],
    python_requires='>=3.6',
    extras_require={
        'test': ['pytest'],
    },
)
