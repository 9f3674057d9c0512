#!/usr/bin/env python

# pylint: disable=too-few-public-methods

"""Errors raised while decoding, encoding and dispatching manifests."""

from typing import Any


class DuplicateRegistrationError(RuntimeError):
    """Error raised when two decoders are registered for the same media type."""

    def __init__(
        self,
        message: str = "Media type is already registered!",
        *,
        media_type: str = None,
    ):
        super().__init__(message)
        self.media_type = media_type


class MalformedManifestError(ValueError):
    """Error raised when a manifest, or one of its descriptors, does not have the required shape."""

    def __init__(
        self, message: str = "Manifest is malformed!", *, manifest: Any = None
    ):
        super().__init__(message)
        self.manifest = manifest


class UninitializedManifestError(RuntimeError):
    """Error raised when the byte representation of a manifest was never assigned."""

    def __init__(
        self,
        message: str = "JSON representation not initialized in DeserializedManifest!",
    ):
        super().__init__(message)


class UnsupportedMediaTypeError(ValueError):
    """Error raised when no decoder is registered for a manifest media type."""

    def __init__(
        self, message: str = "Unsupported media type!", *, media_type: str = None
    ):
        super().__init__(message)
        self.media_type = media_type
