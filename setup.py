#!/usr/bin/env python

import os
import re

from setuptools import setup, find_packages


def find_version(*segments):
    root = os.path.abspath(os.path.dirname(__file__))
    abspath = os.path.join(root, *segments)
    with open(abspath, "r") as file:
        content = file.read()
    match = re.search(r"^__version__ = ['\"]([^'\"]+)['\"]", content, re.MULTILINE)
    if match:
        return match.group(1)
    raise RuntimeError("Unable to find version string!")


setup(
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    description="Content-addressable docker / OCI image manifests that preserve their exact bytes.",
    entry_points="""
        [console_scripts]
        dms=docker_manifest_schema2.scripts.dms:cli
    """,
    extras_require={
        "dev": [
            "black",
            "pylint",
            "pytest",
            "pytest-asyncio",
            "twine",
            "wheel",
        ]
    },
    include_package_data=True,
    install_requires=[
        "aiofiles",
        "canonicaljson",
        "click>=8.0",
        "docker-registry-client-async>=0.2.3",
    ],
    keywords="docker manifest oci registry digest schema2",
    license="Apache License 2.0",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    name="docker_manifest_schema2",
    packages=find_packages(exclude=["tests"]),
    tests_require=[
        "pytest",
        "pytest-asyncio",
    ],
    test_suite="tests",
    version=find_version("docker_manifest_schema2", "__init__.py"),
)
