#!/usr/bin/env python

"""Content-addressable docker / OCI image manifests (version 2, schema 2)."""

from .descriptor import *
from .exceptions import *
from .manifest import *
from .manifestregistry import *
from .schema2manifest import *
from .specs import *

__version__ = "0.1.0"
