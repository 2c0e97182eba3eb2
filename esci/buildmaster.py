# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Buildbot master setup settings abstraction for the Elasticsearch continuous
integration buildbot instances"""

import json
import os
from typing import Optional, List, Dict, Any

import yaml
from buildbot.plugins import util
from buildbot.www.auth import NoAuth
from twisted.python import log

from . import projects
from .commons import line  # utility functions and stuff
from .errors import ConfigurationError


class SetupSettings(object):
    """Buildbot master setup settings abstraction

    :param setup_settings_jsonfile: the path to the JSON file
        automatically created by the deployment entrypoint script (if this
        buildmaster is ran from a container environment)

    """

    def __init__(self,
                 setup_settings_jsonfile: Optional[str] = None,
                ) -> None:
        # Load the private setup settings file into a private dict:
        self.__settings = None
        if setup_settings_jsonfile:
            try:
                with open(setup_settings_jsonfile, 'r') as fp:
                    self.__settings = json.load(fp)
            except FileNotFoundError:
                log.msg(line(
                    """Setup settings file {!r} not found, falling back to the
                    local debugging settings.""").format(
                        setup_settings_jsonfile))
                self.__settings = None

        # Load the project tree addendum (if provided):
        self.project_tree_addendum = None
        if self._project_tree_dir and self._project_tree_yamlfile:
            self.project_tree_addendum = ProjectTreeAddendum(
                directory=self._project_tree_dir,
                yamlfile=self._project_tree_yamlfile
            )

    def buildmaster_config_base(self) -> Dict[str, Any]:
        """Generate a base for the Buildmaster configuration settings as `dict`
        (i.e. the ``BuildmasterConfig`` `dict` that is read by the Buildbot
        twistd application) with all the settings properly defined."""

        title = "Elasticsearch" if self.__settings else "DEBUGGING ONLY"

        return {
            # Presentation settings
            'title': title,
            'titleURL': "https://github.com/elastic/elasticsearch",

            # Database settings
            'db': {
                'db_url': self.db_url,
            },

            # Web UI settings
            'buildbotURL': self.buildbot_url,
            'www': {
                'port': self.www_port,
                # Log HTTP requests in the twistd logging output:
                'logfileName': None,
                'avatar_methods': [],
                'plugins': {
                    'waterfall_view': {},
                    'console_view': {},
                    'grid_view': {},
                },

                # No credentials are handled by this configuration, the web
                # UI is expected to be served behind an authenticating proxy:
                'auth': NoAuth(),
                'authz': util.Authz(),
            },

            # Buildmaster/workers network related settings
            'protocols': {
                'pb': {
                    'port': self.pb_port,
                },
            },

            # Disable Buildbot usage tracking:
            # See: http://docs.buildbot.net/latest/manual/cfg-global.html#buildbotnetusagedata
            'buildbotNetUsageData': None,
        }

    def project_tree(self) -> projects.Project:
        """Build the project tree declared by these settings."""

        return projects.build_tree(
            repository_url=self.repository_url,
            branches=self.development_branches,
            integration_branch=self.integration_branch,
            dsl_vcs_root_name=self.dsl_vcs_root_name,
        )

    @property
    def pb_port(self) -> int:
        """The TCP port on which the Buildbot master instance will listen using
        Twistd PB (Perspective Broker) protocol."""

        if self.__settings:
            return int(self.__settings["BUILDBOT_MASTER_PB_PORT"])
        else:
            return 9989

    @property
    def buildbot_url(self) -> str:
        """The public URL on which Buildbot will be exposed for the Web UI."""

        if self.__settings:
            return self.__settings["BUILDBOT_URL"]
        else:
            return "http://localhost:8010/"

    @property
    def www_port(self) -> int:
        """The TCP port on which the Web UI is served."""

        if self.__settings:
            return int(self.__settings["BUILDBOT_WWW_PORT"])
        else:
            return 8010

    @property
    def db_url(self) -> str:
        """The database URL for Buildbot master instance."""

        if self.__settings and self.__settings.get("BUILDBOT_DB_URL"):
            return self.__settings["BUILDBOT_DB_URL"]
        elif self.__settings:
            return 'postgresql+psycopg2://{user}:{password}@{host}/{db}'.format(
                user=self.__settings["BUILDBOT_POSTGRES_USER"],
                password=self.__settings["BUILDBOT_POSTGRES_PASSWORD"],
                host=self.__settings["BUILDBOT_POSTGRES_HOST"],
                db=self.__settings["BUILDBOT_POSTGRES_DB"],
            )
        else:
            return "sqlite:///state.sqlite"

    @property
    def poll_interval(self) -> int:
        """The interval in seconds between two polls of each VCS root."""

        if self.__settings:
            return int(self.__settings.get("BUILDBOT_POLL_INTERVAL", 600))
        else:
            return 600

    @property
    def repository_url(self) -> str:
        """The URL of the Git repository watched by all the VCS roots. This
        can be overridden by the project tree addendum and defaults to the
        public repository on GitHub."""

        if (self.project_tree_addendum and
                self.project_tree_addendum.repository_url):
            return self.project_tree_addendum.repository_url
        else:
            return projects.DEFAULT_REPOSITORY_URL

    @property
    def integration_branch(self) -> str:
        """The branch holding this CI configuration."""

        if (self.project_tree_addendum and
                self.project_tree_addendum.integration_branch):
            return self.project_tree_addendum.integration_branch
        else:
            return projects.DEFAULT_INTEGRATION_BRANCH

    @property
    def development_branches(self) -> List[str]:
        """The development branches, each one getting its own sub-project."""

        if (self.project_tree_addendum and
                self.project_tree_addendum.development_branches is not None):
            return self.project_tree_addendum.development_branches
        else:
            return list(projects.DEFAULT_DEVELOPMENT_BRANCHES)

    @property
    def dsl_vcs_root_name(self) -> str:
        if (self.project_tree_addendum and
                self.project_tree_addendum.dsl_vcs_root_name):
            return self.project_tree_addendum.dsl_vcs_root_name
        else:
            return projects.DEFAULT_DSL_VCS_ROOT_NAME

    @property
    def dsl_version(self) -> str:
        """The version of the configuration format, handed over to the
        builders as a property."""

        if (self.project_tree_addendum and
                self.project_tree_addendum.dsl_version):
            return self.project_tree_addendum.dsl_version
        else:
            return "2020.1"

    @property
    def _project_tree_dir(self) -> Optional[str]:
        """The path to the project tree addendum directory (if this path is
        specified as relative, it will be computed from the Buildbot master
        configuration root path)"""

        if self.__settings:
            return self.__settings.get("BUILDBOT_PROJECT_TREE_DIR")

    @property
    def _project_tree_yamlfile(self) -> Optional[str]:
        """The path to the YAML file describing the project tree, relative to
        the project tree addendum directory"""

        if self.__settings:
            return self.__settings.get("BUILDBOT_PROJECT_TREE_YAMLFILE")


class ProjectTreeAddendum(object):
    """Class for the project tree addendum to the Buildbot master instance
    setup settings.

    :param directory: the path to the directory where is stored the YAML file
        describing the project tree
    :param yamlfile: the path to the YAML file that describes the project tree
        inputs (repository URL, integration branch, development branches)

    """

    def __init__(self, directory: str, yamlfile: str) -> None:
        self.directory = directory
        with open(os.path.join(self.directory, yamlfile), 'r') as fp:
            self.__settings = yaml.safe_load(fp) or {}
        if not isinstance(self.__settings, dict):
            raise ConfigurationError(line(
                """The project tree file {!r} must describe a mapping.""").format(
                    yamlfile))

    @property
    def repository_url(self) -> Optional[str]:
        return self.__settings.get("repository_url")

    @property
    def integration_branch(self) -> Optional[str]:
        return self.__settings.get("integration_branch")

    @property
    def dsl_vcs_root_name(self) -> Optional[str]:
        return self.__settings.get("dsl_vcs_root_name")

    @property
    def dsl_version(self) -> Optional[str]:
        version = self.__settings.get("dsl_version")
        # YAML happily reads 2020.1 as a float:
        return str(version) if version is not None else None

    @property
    def development_branches(self) -> Optional[List[str]]:
        """The development branches list, `None` when not provided."""

        branches = self.__settings.get("development_branches")
        if branches is None:
            return None
        if not isinstance(branches, list):
            raise ConfigurationError(line(
                """"development_branches" must be a list of branch names, got
                {!r}.""").format(branches))
        # Unquoted branch names such as 7.8 are parsed as floats by YAML (and
        # 7.10 becomes 7.1, hence branch names should be quoted):
        return [
            str(branch)
            if isinstance(branch, (int, float)) and not isinstance(branch, bool)
            else branch
            for branch in branches
        ]

# vim: set ft=python ts=4 sts=4 sw=4 et tw=79:
