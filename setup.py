# -*- coding: utf-8 -*-
"""Install rsbundler

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""
import setuptools


def _requires():
    return [
        "jinja2>=2.7",
        "packaging>=21.0",
        "pykern",
    ]


setuptools.setup(
    name="rsbundler",
    version="20261018.0",
    description="Package applications as native installers and images",
    author="RadiaSoft LLC",
    author_email="pip@pykern.org",
    install_requires=_requires(),
    extras_require={
        "test": ["pytest>=2.7"],
    },
    packages=setuptools.find_packages(include=["rsbundler", "rsbundler.*"]),
    package_data={
        "rsbundler": [
            "package_data/*.jinja",
            "package_data/*/*.jinja",
        ],
    },
    entry_points={
        "console_scripts": [
            "rsbundler=rsbundler.rsbundler_console:main",
        ],
    },
    license="http://www.apache.org/licenses/LICENSE-2.0.html",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Natural Language :: English",
        "Operating System :: POSIX",
        "Programming Language :: Python",
        "Topic :: Software Development :: Build Tools",
        "Topic :: System :: Software Distribution",
    ],
)
