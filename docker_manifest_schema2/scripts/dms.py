#!/usr/bin/env python

# pylint: disable=too-many-arguments

"""docker-manifest-schema2 command line interface."""

import json
import logging
import sys

from pathlib import Path
from traceback import print_exception
from typing import List, NamedTuple

import aiofiles
import click

from click.core import Context
from docker_manifest_schema2 import (
    __version__,
    build_manifest,
    init_registry,
    ManifestSchemaRegistry,
    Schema2MediaTypes,
)

from .utils import (
    async_command,
    LOGGING_DEFAULT,
    logging_options,
    set_log_levels,
    to_descriptor,
)

LOGGER = logging.getLogger(__name__)


class TypingContextObject(NamedTuple):
    # pylint: disable=missing-class-docstring
    registry: ManifestSchemaRegistry
    verbosity: int


def get_context_object(*, context: Context) -> TypingContextObject:
    """Wrapper method to enforce type checking."""
    return context.obj


def _fatal(ctx: TypingContextObject, exception: Exception):
    """Reports an error and terminates."""
    if ctx.verbosity > 0:
        logging.fatal(exception)
    if ctx.verbosity > LOGGING_DEFAULT:
        exc_info = sys.exc_info()
        print_exception(*exc_info)
    sys.exit(1)


@click.group()
@logging_options
@click.pass_context
def cli(context: Context, verbosity: int = LOGGING_DEFAULT):
    """Utility for decoding and building docker image manifests."""

    if verbosity is None:
        verbosity = LOGGING_DEFAULT

    set_log_levels(verbosity)

    # Ambiguous schema dispatch is not recoverable; refuse to start.
    try:
        registry = init_registry()
    except Exception as exception:  # pylint: disable=broad-except
        _fatal(TypingContextObject(registry=None, verbosity=verbosity), exception)

    context.obj = TypingContextObject(registry=registry, verbosity=verbosity)


@cli.command()
@click.option(
    "-c",
    "--config",
    help="Image configuration descriptor, in the form: <hash type>:<digest value>:<size>.",
    required=True,
)
@click.option(
    "-f",
    "--foreign-url",
    "foreign_urls",
    help="URL from which the last layer can be retrieved; marks it as a foreign layer.",
    multiple=True,
)
@click.option(
    "-l",
    "--layer",
    "layers",
    help="Layer descriptor, in the form: <hash type>:<digest value>:<size>. Bottom layer first.",
    multiple=True,
)
@click.option(
    "--oci/--docker",
    default=False,
    help="Toggles OCI vs docker media types.",
    show_default=True,
)
@click.pass_context
def build(
    context: Context,
    config: str,
    foreign_urls: List[str],
    layers: List[str],
    oci: bool,
):
    """Builds a manifest and writes it to stdout."""

    ctx = get_context_object(context=context)
    try:
        if oci:
            media_type = Schema2MediaTypes.OCI_MANIFEST
            config_type = Schema2MediaTypes.OCI_CONFIG
            layer_type = Schema2MediaTypes.OCI_LAYER
        else:
            media_type = Schema2MediaTypes.MANIFEST
            config_type = Schema2MediaTypes.CONFIG
            layer_type = Schema2MediaTypes.LAYER

        descriptors = [to_descriptor(layer_type, layer) for layer in layers]
        if foreign_urls:
            if not descriptors:
                raise click.UsageError("Foreign URLs require at least one layer!")
            descriptors[-1] = descriptors[-1]._replace(
                media_type=Schema2MediaTypes.FOREIGN_LAYER,
                urls=tuple(foreign_urls),
            )

        manifest = build_manifest(
            to_descriptor(config_type, config), descriptors, media_type=media_type
        )
        LOGGER.debug("Built manifest: %s", manifest.get_digest())
        click.echo(bytes(manifest), nl=False)
    except Exception as exception:  # pylint: disable=broad-except
        _fatal(ctx, exception)


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False, exists=True, path_type=Path))
@click.option(
    "-m",
    "--media-type",
    default=Schema2MediaTypes.MANIFEST,
    envvar="DMS_MEDIA_TYPE",
    help="Declared media type of the manifest.",
    show_default=True,
)
@click.pass_context
@async_command
async def inspect(context: Context, media_type: str, path: Path):
    """Decodes a manifest and displays its descriptor and references."""

    ctx = get_context_object(context=context)
    try:
        async with aiofiles.open(path, mode="rb") as file:
            data = await file.read()

        manifest, descriptor = ctx.registry.decode(media_type, data)
        LOGGER.info(
            "Manifest %s (%s) references %d layer(s).",
            path,
            descriptor.digest,
            len(manifest.references()),
        )

        click.echo(
            json.dumps(
                {
                    "descriptor": descriptor.to_json(),
                    "config": manifest.target().to_json(),
                    "layers": [layer.to_json() for layer in manifest.references()],
                },
                indent=2,
            )
        )
    except Exception as exception:  # pylint: disable=broad-except
        _fatal(ctx, exception)


@cli.command()
def version():
    """Displays the utility version."""
    print(__version__)


if __name__ == "__main__":
    # pylint: disable=no-value-for-parameter
    cli()
