#!/usr/bin/env python

"""
Abstraction of a content descriptor, as defined in:

https://github.com/docker/distribution/blob/master/docs/spec/manifest-v2-2.md
(eventually, https://github.com/opencontainers/image-spec/blob/master/descriptor.md)
"""

import re

from typing import Any, Dict, NamedTuple, Optional, Tuple

from .exceptions import MalformedManifestError

# <algorithm>:<encoded>
DIGEST_PATTERN = re.compile(r"^[a-z0-9]+(?:[+._-][a-z0-9]+)*:\S+$")


class Descriptor(NamedTuple):
    """
    Identifies a blob by media type, size and digest.
    """

    media_type: str
    size: int
    digest: str
    urls: Optional[Tuple[str, ...]] = None

    @staticmethod
    def from_json(descriptor_json: Any) -> "Descriptor":
        """
        Creates a descriptor from its decoded JSON form.

        Args:
            descriptor_json: The decoded JSON object.

        Returns:
            The corresponding descriptor.
        """
        if not isinstance(descriptor_json, dict):
            raise MalformedManifestError(
                "Descriptor must be a JSON object!", manifest=descriptor_json
            )

        media_type = descriptor_json.get("mediaType", "")
        if not isinstance(media_type, str):
            raise MalformedManifestError(
                f"Invalid descriptor media type: {media_type}",
                manifest=descriptor_json,
            )

        # Note: bool is a subclass of int, but is not a valid size.
        size = descriptor_json.get("size", 0)
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise MalformedManifestError(
                f"Invalid descriptor size: {size}", manifest=descriptor_json
            )

        digest = descriptor_json.get("digest", "")
        if not isinstance(digest, str) or not DIGEST_PATTERN.match(digest):
            raise MalformedManifestError(
                f"Invalid descriptor digest: {digest}", manifest=descriptor_json
            )

        urls = descriptor_json.get("urls", None)
        if urls is not None and (
            not isinstance(urls, list) or not all(isinstance(u, str) for u in urls)
        ):
            raise MalformedManifestError(
                f"Invalid descriptor urls: {urls}", manifest=descriptor_json
            )

        return Descriptor(
            media_type=media_type,
            size=size,
            digest=digest,
            urls=tuple(urls) if urls is not None else None,
        )

    def to_json(self) -> Dict[str, Any]:
        """
        Retrieves the JSON form of the descriptor, with keys in wire order.

        Returns:
            dict:
                mediaType: The media type of the blob.
                size: The size of the blob in bytes.
                digest: The digest value in the form: <hash type>:<digest value>.
                urls: Foreign URLs from which the blob can be retrieved (optional).
        """
        result = {
            "mediaType": self.media_type,
            "size": self.size,
            "digest": self.digest,
        }
        # Note: An empty URL list is omitted, the same as an absent one.
        if self.urls:
            result["urls"] = list(self.urls)
        return result

    def freeze(self) -> "Descriptor":
        """
        Retrieves a copy of the descriptor that does not share a mutable URL list with the caller.

        Returns:
            The descriptor, with urls stored as a tuple.
        """
        if self.urls is None or isinstance(self.urls, tuple):
            return self
        return self._replace(urls=tuple(self.urls))
