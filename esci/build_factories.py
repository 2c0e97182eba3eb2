# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Build factory classes for the Elasticsearch buildbot instance"""

import buildbot.process.factory

# Convenience shorter names:
from buildbot.plugins import steps

from .projects import VcsRoot


class VcsRootCheckout(buildbot.process.factory.BuildFactory):
    """Check out the branch of a VCS root.

    This only declares how the sources of a VCS root are fetched: what is done
    with them is up to the Buildbot instance operators.

    :param vcs_root: the VCS root to check out

    """

    def __init__(self, vcs_root: VcsRoot) -> None:
        # Initialize Build factory from parent class:
        super().__init__()

        self.vcs_root = vcs_root

        self.addStep(steps.Git(
            name="git",
            description="fetch the {} branch".format(vcs_root.branch_name),
            repourl=vcs_root.repository_url,
            branch=vcs_root.branch_name,
            mode="full",  # there's no need to keep previous build artifacts
            method="clobber",  # obliterate everything beforehand
        ))

# vim: set ft=python ts=4 sts=4 sw=4 et tw=79:
