#!/usr/bin/env python

# pylint: disable=redefined-outer-name

"""CLI tests."""

import json
import logging

from pathlib import Path

import pytest

from click.testing import CliRunner
from docker_registry_client_async import FormattedSHA256
from _pytest.logging import LogCaptureFixture

from docker_manifest_schema2 import (
    __version__,
    build_manifest,
    DeserializedManifest,
    Descriptor,
    DuplicateRegistrationError,
    Schema2MediaTypes,
)
from docker_manifest_schema2.scripts import dms
from docker_manifest_schema2.scripts.dms import cli

from .testutils import get_test_data_path

LOGGER = logging.getLogger(__name__)

DIGEST_A = "sha256:" + "a" * 64
DIGEST_B = "sha256:" + "b" * 64
DIGEST_C = "sha256:" + "c" * 64


@pytest.fixture
def manifest_path(request) -> Path:
    """Provides the path of a sample docker manifest."""
    return get_test_data_path(request, "manifest_docker.json")


def test_empty_args(clirunner: CliRunner):
    """Test dms CLI can be invoked."""
    for command in ["build", "inspect"]:
        result = clirunner.invoke(cli, [command], catch_exceptions=False)
        assert "Usage:" in result.output
        assert result.exit_code != 0


def test_version(clirunner: CliRunner):
    """Test the version can be displayed."""
    result = clirunner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_build(clirunner: CliRunner):
    """Test that a docker manifest can be built."""
    result = clirunner.invoke(
        cli,
        [
            "build",
            "--config",
            f"{DIGEST_A}:100",
            "--layer",
            f"{DIGEST_B}:200",
            "--layer",
            f"{DIGEST_C}:300",
        ],
    )
    assert result.exit_code == 0

    expected = build_manifest(
        Descriptor(media_type=Schema2MediaTypes.CONFIG, size=100, digest=DIGEST_A),
        [
            Descriptor(media_type=Schema2MediaTypes.LAYER, size=200, digest=DIGEST_B),
            Descriptor(media_type=Schema2MediaTypes.LAYER, size=300, digest=DIGEST_C),
        ],
        media_type=Schema2MediaTypes.MANIFEST,
    )
    # The exact serialized bytes are written, without a trailing newline.
    assert result.stdout_bytes == expected.marshal()
    assert FormattedSHA256.calculate(result.stdout_bytes) == expected.get_digest()

    manifest = DeserializedManifest.from_bytes(result.stdout_bytes)
    assert manifest.media_type == Schema2MediaTypes.MANIFEST
    assert manifest.target().digest == DIGEST_A
    assert manifest.target().media_type == Schema2MediaTypes.CONFIG
    assert [layer.digest for layer in manifest.references()] == [DIGEST_B, DIGEST_C]
    assert {layer.media_type for layer in manifest.references()} == {
        Schema2MediaTypes.LAYER
    }


def test_build_oci_foreign(clirunner: CliRunner):
    """Test that an OCI manifest with a foreign layer can be built."""
    result = clirunner.invoke(
        cli,
        [
            "build",
            "--oci",
            "--config",
            f"{DIGEST_A}:100",
            "--layer",
            f"{DIGEST_B}:200",
            "--foreign-url",
            "https://example.com/layer.tar.gz",
        ],
    )
    assert result.exit_code == 0
    assert not result.stdout_bytes.endswith(b"\n")

    manifest = DeserializedManifest.from_bytes(result.stdout_bytes)
    assert manifest.media_type == Schema2MediaTypes.OCI_MANIFEST
    assert manifest.target().media_type == Schema2MediaTypes.OCI_CONFIG
    layer = manifest.references()[0]
    assert layer.media_type == Schema2MediaTypes.FOREIGN_LAYER
    assert layer.urls == ("https://example.com/layer.tar.gz",)


@pytest.mark.parametrize(
    "args",
    [
        ["build", "--config", "sha256:0123"],
        ["build", "--config", f"{DIGEST_A}:-1"],
        ["build", "--config", f"{DIGEST_A}:1", "--foreign-url", "https://x"],
    ],
)
def test_build_invalid(clirunner: CliRunner, args):
    """Test that invalid descriptors are reported."""
    result = clirunner.invoke(cli, args)
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)


def test_inspect(
    caplog: LogCaptureFixture, clirunner: CliRunner, manifest_path: Path, request
):
    """Test that a manifest can be inspected."""
    caplog.set_level(logging.INFO)

    result = clirunner.invoke(cli, ["inspect", str(manifest_path)])
    assert result.exit_code == 0

    output = json.loads(result.output)
    digest = FormattedSHA256.parse(
        get_test_data_path(request, "manifest_docker.json.digest").read_text()
    )
    assert output["descriptor"] == {
        "mediaType": Schema2MediaTypes.MANIFEST,
        "size": manifest_path.stat().st_size,
        "digest": digest,
    }
    assert output["config"]["digest"] == DIGEST_A
    assert [layer["digest"] for layer in output["layers"]] == [DIGEST_B]
    assert "references 1 layer(s)" in caplog.text


def test_inspect_media_type_envvar(clirunner: CliRunner, manifest_path: Path):
    """Test that the declared media type can be assigned from the environment."""
    result = clirunner.invoke(
        cli,
        ["inspect", str(manifest_path)],
        env={"DMS_MEDIA_TYPE": Schema2MediaTypes.OCI_MANIFEST},
    )
    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["descriptor"]["mediaType"] == Schema2MediaTypes.OCI_MANIFEST


def test_inspect_unsupported(
    caplog: LogCaptureFixture, clirunner: CliRunner, manifest_path: Path
):
    """Test that unsupported media types are reported."""
    result = clirunner.invoke(
        cli, ["inspect", "--media-type", "application/x-unknown", str(manifest_path)]
    )
    assert result.exit_code == 1
    assert "Unsupported media type: application/x-unknown" in caplog.text


def test_inspect_malformed(clirunner: CliRunner):
    """Test that malformed manifests are reported."""
    Path("manifest.json").write_bytes(b'{"config": {}}')
    result = clirunner.invoke(cli, ["inspect", "manifest.json"])
    assert result.exit_code == 1


def test_duplicate_registration(
    caplog: LogCaptureFixture,
    clirunner: CliRunner,
    manifest_path: Path,
    monkeypatch,
):
    """Test that registration errors abort startup."""

    def _init_registry():
        raise DuplicateRegistrationError(
            "Manifest media type is already registered: x", media_type="x"
        )

    monkeypatch.setattr(dms, "init_registry", _init_registry)
    result = clirunner.invoke(cli, ["inspect", str(manifest_path)])
    assert result.exit_code == 1
    assert "already registered" in caplog.text
