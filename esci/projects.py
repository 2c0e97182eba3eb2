# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Project tree declaration for the Elasticsearch continuous integration: one
VCS root for the integration branch holding this configuration, and one
sub-project per development branch with its own VCS root."""

import re
from typing import Iterable, NamedTuple, Optional, Set, Tuple

from twisted.python import log

from .commons import branch_ref, line, short_branch_name, to_id
from .errors import ConfigurationError, DuplicateIdentifierError


# The repository hosting both the sources and this CI configuration:
DEFAULT_REPOSITORY_URL = "https://github.com/elastic/elasticsearch.git"

# The branch in which this CI configuration is stored:
DEFAULT_INTEGRATION_BRANCH = "teamcity"

# The name of the VCS root watching the CI configuration itself:
DEFAULT_DSL_VCS_ROOT_NAME = "Elasticsearch Buildbot DSL"

# The branches getting their own sub-project:
DEFAULT_DEVELOPMENT_BRANCHES = ["master", "7.x", "7.8", "6.8"]

ROOT_PROJECT_NAME = "Elasticsearch"


class VcsRoot(NamedTuple):
    """A named reference to a Git repository at a given branch"""

    name: str
    id: str
    repository_url: str
    branch: str  # fully qualified ref, e.g. "refs/heads/master"

    @classmethod
    def for_branch(cls, name: str, repository_url: str,
                   branch: str) -> 'VcsRoot':
        return cls(name=name, id=to_id(name), repository_url=repository_url,
                   branch=branch_ref(branch))

    @property
    def branch_name(self) -> str:
        return short_branch_name(self.branch)


class SubProject(NamedTuple):
    id: str
    name: str
    vcs_roots: Tuple[VcsRoot, ...]


class Project(NamedTuple):
    """The root project of the CI configuration"""

    id: str
    name: str
    vcs_roots: Tuple[VcsRoot, ...]
    sub_projects: Tuple[SubProject, ...]

    def all_vcs_roots(self) -> Tuple[VcsRoot, ...]:
        """All the VCS roots of the tree: the root project ones first, then
        each sub-project ones in declaration order."""

        roots = list(self.vcs_roots)
        for sub_project in self.sub_projects:
            roots.extend(sub_project.vcs_roots)
        return tuple(roots)

    def sub_project(self, id: str) -> Optional[SubProject]:
        for sub_project in self.sub_projects:
            if sub_project.id == id:
                return sub_project
        return None


def development_vcs_root_name(branch: str) -> str:
    return "{} ({})".format(ROOT_PROJECT_NAME, branch)


def _check_unique(identifier: str, seen: Set[str], kind: str) -> None:
    if identifier in seen:
        raise DuplicateIdentifierError(identifier, kind)
    seen.add(identifier)


def _check_branch_name(branch: object, what: str) -> str:
    """Return the short name of a branch, rejecting what cannot make a Git
    branch ref."""

    if (not isinstance(branch, str) or
            not short_branch_name(branch) or
            re.search(r'\s', branch)):
        raise ConfigurationError(line(
            """{} must be a non-empty branch name without whitespace, got
            {!r}.""").format(what, branch))
    return short_branch_name(branch)


def build_tree(repository_url: str = DEFAULT_REPOSITORY_URL,
               branches: Iterable[str] = tuple(DEFAULT_DEVELOPMENT_BRANCHES),
               integration_branch: str = DEFAULT_INTEGRATION_BRANCH,
               dsl_vcs_root_name: str = DEFAULT_DSL_VCS_ROOT_NAME,
              ) -> Project:
    """Build the project tree for the given repository and development
    branches.

    The result only depends on the arguments: the same input always gives the
    same tree, with the same identifiers and ordering.

    :param repository_url: the Git repository URL shared by all VCS roots
    :param branches: the development branches, one sub-project is declared per
        branch in the given order
    :param integration_branch: the branch holding the CI configuration, watched
        by the only VCS root of the root project
    :param dsl_vcs_root_name: the name of that VCS root
    :raises DuplicateIdentifierError: if two VCS roots or two sub-projects
        would share the same identifier
    :raises ConfigurationError: on empty repository URL or malformed branch
        names

    """

    if not isinstance(repository_url, str) or not repository_url.strip():
        raise ConfigurationError(
            "The repository URL must be a non-empty string, got {!r}.".format(
                repository_url))
    branches = list(branches)

    # Every VCS root identifier must be unique across the whole tree since they
    # end up as change source names in the buildmaster:
    vcs_root_ids: Set[str] = set()
    sub_project_ids: Set[str] = set()

    integration_branch = _check_branch_name(integration_branch,
                                            "The integration branch")
    dsl_vcs_root = VcsRoot.for_branch(dsl_vcs_root_name, repository_url,
                                      integration_branch)
    _check_unique(dsl_vcs_root.id, vcs_root_ids, "VCS root")

    sub_projects = []
    for branch in branches:
        branch = _check_branch_name(branch, "Development branches")
        _check_unique(branch, sub_project_ids, "sub-project")

        vcs_root = VcsRoot.for_branch(development_vcs_root_name(branch),
                                      repository_url, branch)
        _check_unique(vcs_root.id, vcs_root_ids, "VCS root")

        sub_projects.append(SubProject(
            id=branch,
            name=branch,
            vcs_roots=(vcs_root,),
        ))

    project = Project(
        id=to_id(ROOT_PROJECT_NAME),
        name=ROOT_PROJECT_NAME,
        vcs_roots=(dsl_vcs_root,),
        sub_projects=tuple(sub_projects),
    )
    log.msg("Declared project tree {!r} with {} sub-project(s): {}".format(
        project.name, len(project.sub_projects),
        ", ".join(sp.id for sp in project.sub_projects) or "none"))
    return project

# vim: set ft=python ts=4 sts=4 sw=4 et tw=79:
