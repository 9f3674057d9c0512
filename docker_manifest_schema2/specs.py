#!/usr/bin/env python

# pylint: disable=too-few-public-methods

"""Reusable string literals."""

from docker_registry_client_async import DockerMediaTypes, OCIMediaTypes

SCHEMA_VERSION = 2


class Schema2MediaTypes:
    """
    Media types of the image manifest, version 2, schema 2, and the blobs it references.
    """

    MANIFEST = DockerMediaTypes.DISTRIBUTION_MANIFEST_V2
    CONFIG = "application/vnd.docker.container.image.v1+json"
    LAYER = "application/vnd.docker.image.rootfs.diff.tar.gzip"
    # Layers that must be retrieved from foreign URLs
    FOREIGN_LAYER = "application/vnd.docker.image.rootfs.foreign.diff.tar.gzip"

    OCI_MANIFEST = OCIMediaTypes.IMAGE_MANIFEST_V1
    OCI_CONFIG = "application/vnd.oci.image.serialization.config.v1+json"
    OCI_LAYER = "application/vnd.oci.image.serialization.rootfs.tar.gzip"

    MANIFEST_TYPES = [MANIFEST, OCI_MANIFEST]
