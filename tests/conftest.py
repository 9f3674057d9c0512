#!/usr/bin/env python

# pylint: disable=redefined-outer-name

"""Configures execution of pytest."""

from typing import Generator

import pytest

from click.testing import CliRunner

from docker_manifest_schema2 import (
    Descriptor,
    ManifestSchemaRegistry,
    Schema2MediaTypes,
)


@pytest.fixture
def clirunner() -> Generator[CliRunner, None, None]:
    """Provides a runner for testing click command line interfaces."""
    runner = CliRunner()
    with runner.isolated_filesystem():
        yield runner


@pytest.fixture
def config_descriptor() -> Descriptor:
    """Provides a sample image configuration descriptor."""
    return Descriptor(
        media_type=Schema2MediaTypes.CONFIG,
        size=100,
        digest="sha256:" + "a" * 64,
    )


@pytest.fixture
def layer_descriptors() -> list:
    """Provides sample layer descriptors, bottom layer first."""
    return [
        Descriptor(
            media_type=Schema2MediaTypes.LAYER, size=200, digest="sha256:" + "b" * 64
        ),
        Descriptor(
            media_type=Schema2MediaTypes.LAYER, size=300, digest="sha256:" + "c" * 64
        ),
    ]


@pytest.fixture
def registry() -> ManifestSchemaRegistry:
    """Provides an isolated, empty, manifest schema registry."""
    # Do not use caching; get a new instance for each test
    return ManifestSchemaRegistry()
