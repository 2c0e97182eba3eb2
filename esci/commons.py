# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Miscellanous utility functions and helpers that may be used globally in this
code base."""

import re

from .errors import ConfigurationError


# The Git ref namespace of the branches:
BRANCH_REF_PREFIX = "refs/heads/"


def line(msg: str) -> str:
    """Rewrap a message by stripping the unneeded indentation, removing leading
    and trailing whitespaces and joining all the lines into one unique text
    line.

    >>> line('''
            A potentially long message that
            can overflow the 79 chars limit
            of PEP 8.
    ''')
    "A potentially long message that can overflow the 79 chars limit of PEP 8."

    """
    return ' '.join([line.strip() for line in msg.split("\n")
                                  if len(line.strip())])


def to_id(name: str) -> str:
    """Derive an identifier from a display name.

    Every run of characters other than ASCII letters and digits is collapsed
    into one underscore, surrounding underscores are dropped and an identifier
    starting with a digit gets an underscore prefix:

    >>> to_id("Elasticsearch (7.x)")
    'Elasticsearch_7_x'
    >>> to_id("7.x")
    '_7_x'

    """

    identifier = re.sub(r'[^A-Za-z0-9]+', "_", name).strip("_")
    if not identifier:
        raise ConfigurationError(
            "Cannot derive an identifier from name {!r}.".format(name))
    if identifier[0].isdigit():
        identifier = "_" + identifier
    return identifier


def branch_ref(branch: str) -> str:
    """Return the full Git ref of a branch, leaving an already qualified ref
    untouched."""

    if branch.startswith(BRANCH_REF_PREFIX):
        return branch
    return BRANCH_REF_PREFIX + branch


def short_branch_name(ref: str) -> str:
    """Inverse of :func:`branch_ref`."""

    if ref.startswith(BRANCH_REF_PREFIX):
        return ref[len(BRANCH_REF_PREFIX):]
    return ref

# vim: set ft=python ts=4 sts=4 sw=4 et tw=79:
