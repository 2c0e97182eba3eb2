# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Elasticsearch continuous integration configuration module"""

# Expose all the public sub-modules directly from this module for developer
# convenience and avoid the need to import all the interesting sub-modules of
# this package constantly.
from . import (
    build_factories,
    buildmaster,
    commons,
    errors,
    projects,
    rendering,
)

# vim: set ft=python ts=4 sts=4 sw=4 et tw=79:
