#!/usr/bin/env python

"""Utility classes."""

import logging
import sys

from functools import wraps

import asyncio
import click

from docker_manifest_schema2 import Descriptor

LOGGING_DEFAULT = 2

LOGGING_LEVELS = {
    0: logging.FATAL + 10,
    1: logging.WARNING,
    2: logging.INFO,
    3: logging.DEBUG,
    4: logging.NOTSET,
}


def async_command(func):
    """Asynchronous command wrapper that allows click commands to be async."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        # pylint: disable=no-member,protected-access
        coroutine = func(*args, **kwargs)
        event_loop = asyncio._get_running_loop()
        # Allow func to be called, or awaited ...
        if event_loop is None:
            return asyncio.run(coroutine)
        return coroutine

    return wrapper


def logging_options(function):
    """Common logging options."""

    function = click.option(
        "-s",
        "--silent",
        "verbosity",
        flag_value=LOGGING_DEFAULT - 2,
        help="Suppress all output.",
    )(function)
    function = click.option(
        "-q",
        "--quiet",
        "verbosity",
        flag_value=LOGGING_DEFAULT - 1,
        help="Restrict output to warnings and errors.",
    )(function)
    function = click.option(
        "-d",
        "--debug",
        "-v",
        "--verbose",
        "verbosity",
        flag_value=LOGGING_DEFAULT + 1,
        help="Show debug logging.",
    )(function)
    function = click.option(
        "-vv",
        "--very-verbose",
        "verbosity",
        flag_value=LOGGING_DEFAULT + 2,
        help="Enable all logging.",
    )(function)

    return function


def set_log_levels(verbosity: int = LOGGING_DEFAULT):
    """
    Assigns the logging level and format for a given verbosity.

    Args:
        verbosity: The logging verbosity level from  0 (least verbose) to 4 (most verbose).
    """
    level = LOGGING_LEVELS[verbosity]
    _format = "%(message)s"
    if verbosity > LOGGING_DEFAULT:
        _format = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

    logging.basicConfig(
        datefmt="%Y-%m-%d %H:%M:%S", format=_format, level=level, stream=sys.stdout
    )


def to_descriptor(media_type: str, value: str) -> Descriptor:
    """
    Converts a descriptor specification to a Descriptor.

    Args:
        media_type: The media type of the blob.
        value: The descriptor specification in the form: <hash type>:<digest value>:<size>.

    Returns:
        The corresponding descriptor.
    """
    digest, _, size = value.rpartition(":")
    try:
        size = int(size)
    except ValueError as exception:
        raise click.BadParameter(f"Invalid size in descriptor: {value}") from exception
    return Descriptor.from_json(
        {"mediaType": media_type, "size": size, "digest": digest}
    )
