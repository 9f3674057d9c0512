#!/usr/bin/env python

"""Abstract capability set shared by every manifest schema."""

import abc

from typing import List, Tuple

from .descriptor import Descriptor


class Manifest(abc.ABC):
    """
    Abstract class to inspect a decoded image manifest without knowing its schema.
    """

    @abc.abstractmethod
    def payload(self) -> Tuple[str, bytes]:
        """
        Retrieves the raw content of the manifest, which can be used to calculate the content identifier.

        Returns:
            tuple:
                media_type: The media type of the manifest.
                payload: The exact bytes of the manifest.
        """

    @abc.abstractmethod
    def references(self) -> List[Descriptor]:
        """
        Retrieves the descriptors of the blobs referenced by the manifest.

        Returns:
            list: The referenced descriptors, in manifest order.
        """

    @abc.abstractmethod
    def target(self) -> Descriptor:
        """
        Retrieves the descriptor of the blob the manifest describes.

        Returns:
            The target descriptor.
        """
