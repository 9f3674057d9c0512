#!/usr/bin/env python

"""Command line interface(s) for the docker_manifest_schema2 package."""
