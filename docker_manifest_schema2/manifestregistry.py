#!/usr/bin/env python

"""Dispatch of raw manifest bytes to schema-specific decoders, by media type."""

import logging
import threading

from typing import Callable, Dict, List, Tuple

from .descriptor import Descriptor
from .exceptions import DuplicateRegistrationError, UnsupportedMediaTypeError
from .manifest import Manifest

LOGGER = logging.getLogger(__name__)

ManifestDecoder = Callable[[bytes], Tuple[Manifest, Descriptor]]


class ManifestSchemaRegistry:
    """
    Associates manifest media types with the decoders that understand them.

    The table is populated once, during startup, and only read afterwards.
    """

    def __init__(self):
        self._decoders: Dict[str, ManifestDecoder] = {}
        self._lock = threading.Lock()

    def __contains__(self, media_type: str) -> bool:
        return media_type in self._decoders

    def __len__(self) -> int:
        return len(self._decoders)

    def decode(self, media_type: str, data: bytes) -> Tuple[Manifest, Descriptor]:
        """
        Decodes a manifest using the decoder registered for a given media type.

        Args:
            media_type: The declared media type of the manifest.
            data: The raw manifest value.

        Returns:
            tuple:
                manifest: The decoded manifest.
                descriptor: The descriptor of the raw manifest value.
        """
        decoder = self._decoders.get(media_type, None)
        if decoder is None:
            raise UnsupportedMediaTypeError(
                f"Unsupported media type: {media_type}", media_type=media_type
            )

        LOGGER.debug("Decoding %d byte(s) as: %s", len(data), media_type)
        return decoder(data)

    def get_media_types(self) -> List[str]:
        """
        Retrieves the registered media types.

        Returns:
            list: The registered media types, sorted.
        """
        return sorted(self._decoders)

    def register(self, media_type: str, decoder: ManifestDecoder):
        """
        Associates a decoder with a media type.

        Registering the same decoder twice for a media type has no effect; registering a different decoder for a media
        type that is already registered is an error.

        Args:
            media_type: The manifest media type.
            decoder: Callable that converts raw manifest bytes into a manifest and its descriptor.
        """
        with self._lock:
            existing = self._decoders.get(media_type, None)
            if existing is decoder:
                return
            if existing is not None:
                raise DuplicateRegistrationError(
                    f"Manifest media type is already registered: {media_type}",
                    media_type=media_type,
                )
            self._decoders[media_type] = decoder
        LOGGER.debug("Registered manifest media type: %s", media_type)


def init_registry(registry: ManifestSchemaRegistry = None) -> ManifestSchemaRegistry:
    """
    Populates a registry with every built-in manifest schema.

    Registration errors are not handled here; callers are expected to treat them as fatal.

    Args:
        registry: The registry to be populated. A new registry is created if omitted.

    Returns:
        The populated registry.
    """
    # pylint: disable=import-outside-toplevel
    from .schema2manifest import register_schema2

    if registry is None:
        registry = ManifestSchemaRegistry()
    register_schema2(registry)
    return registry
