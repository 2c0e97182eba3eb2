# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Rendering of the project tree into the Buildbot master configuration
objects (change sources, projects, builders)"""

from typing import Any, Dict, List, Sequence

from buildbot.plugins import changes, schedulers, util, worker
from twisted.python import log

from .build_factories import VcsRootCheckout
from .projects import Project, SubProject, VcsRoot


# The worker in charge of the checkout builders:
CHECKOUT_WORKER_NAME = '_checkout-localworker'

# The manually triggered scheduler driving the checkout builders:
FORCE_CHECKOUT_SCHEDULER_NAME = 'force-checkout'


def _git_poller(vcs_root: VcsRoot, project_name: str,
                poll_interval: int) -> changes.GitPoller:
    return changes.GitPoller(
        name=vcs_root.id,
        repourl=vcs_root.repository_url,
        branches=[vcs_root.branch_name],
        project=project_name,
        # Each poller gets its own clone not to step on each other:
        workdir='gitpoller-{}'.format(vcs_root.id),
        pollInterval=poll_interval,
    )


def change_sources(project: Project,
                   poll_interval: int = 600) -> List[changes.GitPoller]:
    """One Git poller per VCS root of the tree, tagged with the name of the
    project owning the VCS root."""

    pollers = [_git_poller(vcs_root, project.name, poll_interval)
               for vcs_root in project.vcs_roots]
    for sub_project in project.sub_projects:
        pollers.extend(_git_poller(vcs_root, sub_project.name, poll_interval)
                       for vcs_root in sub_project.vcs_roots)
    return pollers


def projects(project: Project) -> List[util.Project]:
    return [
        util.Project(
            name=sub_project.id,
            description="{} development branch(es): {}".format(
                project.name, ", ".join(vcs_root.branch_name
                                        for vcs_root in sub_project.vcs_roots)),
        )
        for sub_project in project.sub_projects
    ]


def checkout_builder_name(vcs_root: VcsRoot) -> str:
    # VCS root names are unique since their derived identifiers are:
    return 'checkout {}'.format(vcs_root.name)


def builders(project: Project, workernames: Sequence[str],
             dsl_version: str) -> List[util.BuilderConfig]:
    """One checkout builder per VCS root of the tree. The builders of the
    root project VCS roots are not bound to any Buildbot project."""

    owned = [(None, vcs_root) for vcs_root in project.vcs_roots]
    for sub_project in project.sub_projects:
        owned.extend((sub_project.id, vcs_root)
                     for vcs_root in sub_project.vcs_roots)

    return [
        util.BuilderConfig(
            name=checkout_builder_name(vcs_root),
            description="Check out the {} branch of {}".format(
                vcs_root.branch_name, vcs_root.repository_url),
            tags=['checkout', 'branch:{}'.format(vcs_root.branch_name)],
            project=project_id,
            workernames=list(workernames),
            factory=VcsRootCheckout(vcs_root),
            properties={
                "dsl_version": dsl_version,
                "vcs_root_id": vcs_root.id,
            },
        )
        for project_id, vcs_root in owned
    ]


def force_checkout_scheduler(
        checkout_builders: Sequence[util.BuilderConfig],
        ) -> schedulers.ForceScheduler:
    """Force scheduler over the checkout builders, only triggered from the web
    UI."""

    return schedulers.ForceScheduler(
        name=FORCE_CHECKOUT_SCHEDULER_NAME,
        buttonName="Check out this branch now",
        label="Checkout",
        builderNames=[builder.name for builder in checkout_builders],
    )


def describe(project: Project) -> Dict[str, Any]:
    """Plain nested `dict` rendering of the project tree."""

    def vcs_root_dict(vcs_root: VcsRoot) -> Dict[str, str]:
        return {
            'id': vcs_root.id,
            'name': vcs_root.name,
            'url': vcs_root.repository_url,
            'branch': vcs_root.branch,
        }

    def sub_project_dict(sub_project: SubProject) -> Dict[str, Any]:
        return {
            'id': sub_project.id,
            'name': sub_project.name,
            'vcs_roots': [vcs_root_dict(r) for r in sub_project.vcs_roots],
        }

    return {
        'id': project.id,
        'name': project.name,
        'vcs_roots': [vcs_root_dict(r) for r in project.vcs_roots],
        'sub_projects': [sub_project_dict(sp) for sp in project.sub_projects],
    }


def configure(config: Dict[str, Any], project: Project,
              poll_interval: int = 600,
              dsl_version: str = "2020.1") -> Dict[str, Any]:
    """Fill the given ``BuildmasterConfig`` `dict` with the declarations of
    the project tree and return it.

    The checkout builders are only driven by a force scheduler: nothing is
    built unless an operator asks for it from the web UI.

    """

    checkout_worker = worker.LocalWorker(CHECKOUT_WORKER_NAME)

    config['workers'] = [checkout_worker]
    config['change_source'] = change_sources(project, poll_interval)
    config['projects'] = projects(project)
    config['builders'] = builders(project, [checkout_worker.name], dsl_version)
    config['schedulers'] = [force_checkout_scheduler(config['builders'])]

    log.msg("Configured {} change source(s) and {} builder(s) for {!r}".format(
        len(config['change_source']), len(config['builders']), project.name))
    return config

# vim: set ft=python ts=4 sts=4 sw=4 et tw=79:
