# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Exceptions raised while evaluating the CI configuration"""


class ConfigurationError(Exception):
    """Malformed CI configuration input. The Buildbot master configuration
    must not be loaded when this is raised."""


class DuplicateIdentifierError(ConfigurationError):
    """Two entries of the project tree resolve to the same identifier.

    :param identifier: the colliding identifier
    :param kind: what kind of entry collided (``"VCS root"`` or
        ``"sub-project"``)

    """

    def __init__(self, identifier: str, kind: str) -> None:
        self.identifier = identifier
        self.kind = kind
        super().__init__(
            "Duplicate {} identifier {!r} in the project tree.".format(
                kind, identifier))

# vim: set ft=python ts=4 sts=4 sw=4 et tw=79:
