# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Shared fixtures for the CI configuration tests"""

import json

import pytest


@pytest.fixture
def write_settings(tmp_path):
    """Write a setup settings JSON file (and optionally its project tree YAML
    addendum) and return the path to the JSON file."""

    def _write(settings=None, project_tree_yaml=None):
        settings = dict(settings or {})
        if project_tree_yaml is not None:
            (tmp_path / "project_tree.yaml").write_text(project_tree_yaml)
            settings.setdefault("BUILDBOT_PROJECT_TREE_DIR", str(tmp_path))
            settings.setdefault("BUILDBOT_PROJECT_TREE_YAMLFILE",
                                "project_tree.yaml")
        path = tmp_path / "setup_settings.json"
        path.write_text(json.dumps(settings))
        return str(path)

    return _write


@pytest.fixture
def deployment_settings():
    """Settings as written by the container entrypoint script."""
    return {
        "BUILDBOT_MASTER_PB_PORT": "19989",
        "BUILDBOT_WWW_PORT": "18010",
        "BUILDBOT_URL": "https://ci.example.org/",
        "BUILDBOT_POSTGRES_USER": "buildbot",
        "BUILDBOT_POSTGRES_PASSWORD": "secret",
        "BUILDBOT_POSTGRES_HOST": "db",
        "BUILDBOT_POSTGRES_DB": "bbdb",
        "BUILDBOT_POLL_INTERVAL": "120",
    }
