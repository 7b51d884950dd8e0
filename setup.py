#!/usr/bin/env python
from setuptools import setup, find_packages

setup(
    name="subpace",
    version="1.0.0",
    description="Subdomain Paced Enumeration",
    author="SUBPACE Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "dnspython>=2.4",
        "tqdm",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "subpace=subpace.cli:main",
        ],
    },
    python_requires=">=3.9",
)
