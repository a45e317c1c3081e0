#!/usr/bin/env python
# -*- coding: utf-8 -*-

from setuptools import setup

def get_README():
    content = ""
    with open("README.md") as f:
        content += f.read()
    return content

setup(
    name="modular",
    python_requires=">=3.8",
    version="0.1.0",
    license="BSD",
    description="Integers modulo a type-level bound, with the ergonomics of native integers.",
    long_description=get_README(),
    long_description_content_type="text/markdown",
    packages=["modular"],
    package_data={"modular": ["py.typed"]},
    zip_safe=False,
    install_requires=[
        "BitVector>=3.4.9",
        "mypy>=1.0",
        "typing_extensions>=4.0"
    ],
    extras_require={
        "test": ["pytest"]
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3"
    ],
)
