#!/usr/bin/env python

"""
Image manifest, version 2, schema 2, as defined in:

https://github.com/docker/distribution/blob/master/docs/spec/manifest-v2-2.md
"""

import functools
import json
import logging

from typing import Any, Dict, List, NamedTuple, Sequence, Tuple

import canonicaljson

from docker_registry_client_async import FormattedSHA256

from .descriptor import Descriptor
from .exceptions import MalformedManifestError, UninitializedManifestError
from .manifest import Manifest
from .manifestregistry import ManifestDecoder, ManifestSchemaRegistry
from .specs import SCHEMA_VERSION, Schema2MediaTypes

LOGGER = logging.getLogger(__name__)

# Indentation used when serializing a manifest that was built, rather than decoded
INDENT = 3


class Schema2Manifest(NamedTuple):
    """
    Structured view of a schema 2 manifest.
    """

    config: Descriptor
    layers: Tuple[Descriptor, ...] = ()
    media_type: str = Schema2MediaTypes.OCI_MANIFEST
    schema_version: int = SCHEMA_VERSION

    @staticmethod
    def from_json(manifest_json: Any) -> "Schema2Manifest":
        """
        Creates a manifest from its decoded JSON form.

        Args:
            manifest_json: The decoded JSON object.

        Returns:
            The corresponding manifest.
        """
        if not isinstance(manifest_json, dict):
            raise MalformedManifestError(
                "Manifest must be a JSON object!", manifest=manifest_json
            )

        schema_version = manifest_json.get("schemaVersion", 0)
        if isinstance(schema_version, bool) or not isinstance(schema_version, int):
            raise MalformedManifestError(
                f"Invalid schema version: {schema_version}", manifest=manifest_json
            )

        media_type = manifest_json.get("mediaType", "")
        if not isinstance(media_type, str):
            raise MalformedManifestError(
                f"Invalid manifest media type: {media_type}", manifest=manifest_json
            )

        if "config" not in manifest_json:
            raise MalformedManifestError(
                "Unable to locate config key within manifest!", manifest=manifest_json
            )

        # Note: A null layer list decodes the same as an empty one.
        layers = manifest_json.get("layers", None)
        if layers is None:
            layers = []
        if not isinstance(layers, list):
            raise MalformedManifestError(
                "Manifest layers must be a JSON array!", manifest=manifest_json
            )

        return Schema2Manifest(
            config=Descriptor.from_json(manifest_json["config"]),
            layers=tuple(Descriptor.from_json(layer) for layer in layers),
            media_type=media_type,
            schema_version=schema_version,
        )

    def references(self) -> List[Descriptor]:
        """
        Retrieves the layer descriptors.

        Returns:
            list: Layer descriptors, from the bottom of the layer stack to the top.
        """
        return list(self.layers)

    def target(self) -> Descriptor:
        """
        Retrieves the image configuration descriptor.

        Returns:
            The image configuration descriptor.
        """
        return self.config

    def to_json(self) -> Dict[str, Any]:
        """
        Retrieves the JSON form of the manifest, with keys in wire order.

        Returns:
            The manifest as a dictionary.
        """
        return {
            "schemaVersion": self.schema_version,
            "mediaType": self.media_type,
            "config": self.config.to_json(),
            "layers": [layer.to_json() for layer in self.layers],
        }


class DeserializedManifest(Manifest):
    """
    Schema 2 manifest that retains the exact bytes it was decoded from, or first serialized to.

    The retained bytes are the only representation used for transmission and digest calculation; they are never
    regenerated from the structured fields.
    """

    def __init__(self):
        self._canonical: bytes = None
        self._manifest: Schema2Manifest = None

    def __bytes__(self) -> bytes:
        return self.marshal()

    def __str__(self) -> str:
        return self.marshal().decode("utf-8")

    @staticmethod
    def from_bytes(data: bytes) -> "DeserializedManifest":
        """
        Decodes a manifest, retaining a copy of the given bytes.

        Args:
            data: The raw manifest value.

        Returns:
            The decoded manifest.
        """
        result = DeserializedManifest()
        result.unmarshal(data)
        return result

    @staticmethod
    def from_struct(manifest: Schema2Manifest) -> "DeserializedManifest":
        """
        Serializes a manifest structure, retaining the serialized form.

        Args:
            manifest: The manifest structure.

        Returns:
            The manifest and its serialized form.
        """
        manifest = manifest._replace(
            config=manifest.config.freeze(),
            layers=tuple(layer.freeze() for layer in manifest.layers),
        )
        result = DeserializedManifest()
        result._manifest = manifest
        result._canonical = json.dumps(manifest.to_json(), indent=INDENT).encode(
            "utf-8"
        )
        return result

    @property
    def config(self) -> Descriptor:
        # pylint: disable=missing-function-docstring
        return self._get_manifest().config

    @property
    def layers(self) -> Tuple[Descriptor, ...]:
        # pylint: disable=missing-function-docstring
        return self._get_manifest().layers

    @property
    def manifest(self) -> Schema2Manifest:
        # pylint: disable=missing-function-docstring
        return self._get_manifest()

    @property
    def media_type(self) -> str:
        # pylint: disable=missing-function-docstring
        return self._get_manifest().media_type

    @property
    def schema_version(self) -> int:
        # pylint: disable=missing-function-docstring
        return self._get_manifest().schema_version

    def _get_manifest(self) -> Schema2Manifest:
        if self._manifest is None:
            raise UninitializedManifestError()
        return self._manifest

    def get_bytes_canonical(self) -> bytes:
        """
        Retrieves the structured content of the manifest in canonical JSON form.

        Unlike :func:~docker_manifest_schema2.DeserializedManifest.marshal, the result does not depend on the whitespace
        or key order of the bytes the manifest was decoded from.

        Returns:
            The manifest in canonical JSON form.
        """
        return canonicaljson.encode_canonical_json(self._get_manifest().to_json())

    def get_descriptor(self) -> Descriptor:
        """
        Retrieves the descriptor of the retained bytes, using the media type declared within the manifest.

        Returns:
            The manifest descriptor.
        """
        data = self.marshal()
        return Descriptor(
            media_type=self.media_type,
            size=len(data),
            digest=FormattedSHA256.calculate(data),
        )

    def get_digest(self) -> FormattedSHA256:
        """
        Retrieves the SHA256 digest value of the retained bytes.

        Returns:
            The SHA256 digest value of the manifest.
        """
        return FormattedSHA256.calculate(self.marshal())

    def get_digest_canonical(self) -> FormattedSHA256:
        """
        Retrieves the SHA256 digest value of the manifest in canonical JSON form.

        Returns:
            The SHA256 digest value of the manifest in canonical JSON form.
        """
        return FormattedSHA256.calculate(self.get_bytes_canonical())

    def is_equivalent(self, other: "DeserializedManifest") -> bool:
        """
        Checks if two manifests have the same structured content, regardless of how each was serialized.

        Args:
            other: The manifest to be compared.

        Returns:
            True if the structured content is equal, false otherwise.
        """
        return self.get_bytes_canonical() == other.get_bytes_canonical()

    def marshal(self) -> bytes:
        """
        Retrieves the retained bytes.

        Returns:
            The exact bytes the manifest was decoded from, or first serialized to.
        """
        if not self._canonical:
            raise UninitializedManifestError()
        return self._canonical

    def unmarshal(self, data: bytes):
        """
        Replaces the content of the manifest by decoding the given bytes.

        Args:
            data: The raw manifest value.
        """
        canonical = bytes(data)
        manifest = Schema2Manifest.from_json(json.loads(canonical))

        self._canonical = canonical
        self._manifest = manifest

    # Manifest Members

    def payload(self) -> Tuple[str, bytes]:
        return self.media_type, self.marshal()

    def references(self) -> List[Descriptor]:
        return self._get_manifest().references()

    def target(self) -> Descriptor:
        return self._get_manifest().target()


def build_manifest(
    config: Descriptor,
    layers: Sequence[Descriptor] = (),
    *,
    media_type: str = Schema2MediaTypes.OCI_MANIFEST,
) -> DeserializedManifest:
    """
    Builds a manifest from its parts.

    Args:
        config: The image configuration descriptor.
        layers: The layer descriptors, from the bottom of the layer stack to the top.
        media_type: The media type of the manifest.

    Returns:
        The manifest and its serialized form.
    """
    return DeserializedManifest.from_struct(
        Schema2Manifest(
            config=config,
            layers=tuple(layers),
            media_type=media_type,
            schema_version=SCHEMA_VERSION,
        )
    )


@functools.lru_cache(maxsize=None)
def schema2_decoder(media_type: str) -> ManifestDecoder:
    """
    Retrieves the decoder for a given schema 2 media type.

    The same decoder instance is returned for a given media type, so repeated registration is idempotent.

    Args:
        media_type: The media type assigned to the descriptors of decoded manifests.

    Returns:
        Callable that converts raw manifest bytes into a manifest and its descriptor.
    """

    def decode(data: bytes) -> Tuple[DeserializedManifest, Descriptor]:
        manifest = DeserializedManifest.from_bytes(data)
        # Note: The digest is always calculated over the given bytes, never a re-serialization.
        descriptor = Descriptor(
            media_type=media_type,
            size=len(data),
            digest=FormattedSHA256.calculate(bytes(data)),
        )
        return manifest, descriptor

    return decode


def register_schema2(registry: ManifestSchemaRegistry):
    """
    Registers the schema 2 decoders, for both the docker and the OCI media types.

    Args:
        registry: The registry in which to register the decoders.
    """
    for media_type in Schema2MediaTypes.MANIFEST_TYPES:
        LOGGER.debug("Registering schema 2 decoder for: %s", media_type)
        registry.register(media_type, schema2_decoder(media_type))
