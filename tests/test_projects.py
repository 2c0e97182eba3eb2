# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Unit tests for the project tree builder"""
import pytest

from esci.errors import ConfigurationError, DuplicateIdentifierError
from esci.projects import (
    DEFAULT_DEVELOPMENT_BRANCHES,
    Project,
    SubProject,
    VcsRoot,
    build_tree,
)

REPOSITORY_URL = "https://github.com/elastic/elasticsearch.git"


class TestBuildTree:
    """Test the shape of the produced project tree."""

    def test_reference_branches(self):
        project = build_tree(REPOSITORY_URL, ["master", "7.x"])

        assert len(project.vcs_roots) == 1
        assert project.vcs_roots[0].branch == "refs/heads/teamcity"
        assert [sp.id for sp in project.sub_projects] == ["master", "7.x"]
        assert project.sub_project("master").vcs_roots[0].branch == \
            "refs/heads/master"
        assert project.sub_project("7.x").vcs_roots[0].branch == \
            "refs/heads/7.x"

    def test_empty_branch_list(self):
        project = build_tree(REPOSITORY_URL, [])

        assert len(project.vcs_roots) == 1
        assert project.vcs_roots[0].branch == "refs/heads/teamcity"
        assert project.sub_projects == ()

    def test_one_sub_project_per_branch_in_order(self):
        branches = ["6.8", "master", "7.8", "7.x", "feature/ingest"]
        project = build_tree(REPOSITORY_URL, branches)

        assert [sp.id for sp in project.sub_projects] == branches
        assert [sp.name for sp in project.sub_projects] == branches

    @pytest.mark.parametrize("branch", DEFAULT_DEVELOPMENT_BRANCHES)
    def test_sub_project_vcs_root(self, branch):
        project = build_tree(REPOSITORY_URL, DEFAULT_DEVELOPMENT_BRANCHES)
        sub_project = project.sub_project(branch)

        assert len(sub_project.vcs_roots) == 1
        vcs_root = sub_project.vcs_roots[0]
        assert vcs_root.branch == "refs/heads/{}".format(branch)
        assert vcs_root.branch_name == branch
        assert vcs_root.name == "Elasticsearch ({})".format(branch)
        assert vcs_root.repository_url == REPOSITORY_URL

    def test_dsl_vcs_root(self):
        project = build_tree(REPOSITORY_URL, ["master"])
        vcs_root = project.vcs_roots[0]

        assert vcs_root == VcsRoot(
            name="Elasticsearch Buildbot DSL",
            id="Elasticsearch_Buildbot_DSL",
            repository_url=REPOSITORY_URL,
            branch="refs/heads/teamcity",
        )

    def test_custom_integration_branch(self):
        project = build_tree(REPOSITORY_URL, ["master"],
                             integration_branch="ci-config",
                             dsl_vcs_root_name="Config")

        assert project.vcs_roots[0].branch == "refs/heads/ci-config"
        assert project.vcs_roots[0].id == "Config"

    def test_qualified_branch_names(self):
        project = build_tree(REPOSITORY_URL, ["refs/heads/master"])

        assert project.sub_projects[0].id == "master"
        assert project.sub_projects[0].vcs_roots[0].branch == \
            "refs/heads/master"

    def test_is_deterministic(self):
        branches = ["master", "7.x", "7.8", "6.8"]

        first = build_tree(REPOSITORY_URL, branches)
        second = build_tree(REPOSITORY_URL, list(branches))

        assert first == second
        assert [r.id for r in first.all_vcs_roots()] == \
            [r.id for r in second.all_vcs_roots()]

    def test_vcs_root_ids_are_unique(self):
        project = build_tree(REPOSITORY_URL, DEFAULT_DEVELOPMENT_BRANCHES)
        ids = [r.id for r in project.all_vcs_roots()]

        assert len(ids) == len(set(ids)) == 5

    def test_accepts_any_iterable(self):
        project = build_tree(REPOSITORY_URL, (b for b in ["master", "7.x"]))

        assert len(project.sub_projects) == 2

    def test_defaults(self):
        project = build_tree()

        assert isinstance(project, Project)
        assert [sp.id for sp in project.sub_projects] == \
            DEFAULT_DEVELOPMENT_BRANCHES
        assert project.vcs_roots[0].repository_url == REPOSITORY_URL

    def test_sub_project_lookup_miss(self):
        assert build_tree(REPOSITORY_URL, ["master"]).sub_project("5.x") is None

    def test_structure(self):
        project = build_tree(REPOSITORY_URL, ["7.x"])

        assert project.sub_projects == (SubProject(
            id="7.x",
            name="7.x",
            vcs_roots=(VcsRoot(
                name="Elasticsearch (7.x)",
                id="Elasticsearch_7_x",
                repository_url=REPOSITORY_URL,
                branch="refs/heads/7.x",
            ),),
        ),)


class TestBuildTreeErrors:
    """Test that malformed input fails the whole evaluation."""

    def test_duplicate_branch(self):
        with pytest.raises(DuplicateIdentifierError) as excinfo:
            build_tree(REPOSITORY_URL, ["master", "7.x", "master"])

        assert excinfo.value.identifier == "master"
        assert excinfo.value.kind == "sub-project"

    def test_duplicate_after_qualification(self):
        with pytest.raises(DuplicateIdentifierError):
            build_tree(REPOSITORY_URL, ["master", "refs/heads/master"])

    def test_colliding_vcs_root_ids(self):
        with pytest.raises(DuplicateIdentifierError) as excinfo:
            build_tree(REPOSITORY_URL, ["7.x", "7-x"])

        assert excinfo.value.identifier == "Elasticsearch_7_x"
        assert excinfo.value.kind == "VCS root"

    def test_collision_with_dsl_vcs_root(self):
        with pytest.raises(DuplicateIdentifierError):
            build_tree(REPOSITORY_URL, ["master"],
                       dsl_vcs_root_name="Elasticsearch master")

    def test_duplicate_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            build_tree(REPOSITORY_URL, ["6.8", "6.8"])

    @pytest.mark.parametrize("branch", ["", "   ", "refs/heads/", " master", "master ", "feature x",
                                        None, 7])
    def test_invalid_branch_name(self, branch):
        with pytest.raises(ConfigurationError):
            build_tree(REPOSITORY_URL, ["master", branch])

    @pytest.mark.parametrize("branch", ["", " teamcity", "refs/heads/", None])
    def test_invalid_integration_branch(self, branch):
        with pytest.raises(ConfigurationError):
            build_tree(REPOSITORY_URL, ["master"], integration_branch=branch)

    @pytest.mark.parametrize("url", ["", "  ", None, 42])
    def test_empty_repository_url(self, url):
        with pytest.raises(ConfigurationError):
            build_tree(url, ["master"])

# vim: set ft=python ts=4 sts=4 sw=4 et tw=79:
