# SPDX-License-Identifier: LGPL-2.1-or-later
# Copyright © 2019 ANSSI. All rights reserved.

"""Elasticsearch Buildbot continuous integration master node configuration"""

import datetime
import json

import esci

from buildbot import config as buildbot_config
from buildbot.plugins import util
from twisted.python import log


#
# PRIVATE SETUP SETTINGS RELATIVE TO THE BUILDBOT MASTER DEPLOYMENT
#
# The settings depending on the way this Buildbot master instance has been
# deployed (ports, database, public URL) come from a "setup_settings.json" file
# created by the container entrypoint script. The project tree inputs
# (repository URL, integration branch and development branches) may be
# overridden by the YAML file this JSON file points to.
#
# If the JSON file cannot be found, default settings corresponding to a local
# deployment are used (mainly for debugging purposes for developers).
setup = esci.buildmaster.SetupSettings("setup_settings.json")


#
# BUILDBOT MASTER CONFIGURATION DATA STRUCTURE INITIALIZATION
#
# This is the dictionary that the buildmaster pays attention to. The variable
# MUST be named BuildmasterConfig. A shorter alias is defined for typing
# convenience below.
#

BuildmasterConfig = c = setup.buildmaster_config_base()


#
# PROJECT TREE
#
# One VCS root watching the branch holding this configuration, then one
# sub-project per development branch with its own VCS root. A malformed tree
# (e.g. duplicate branches) is reported as a configuration error so that the
# buildmaster refuses to load it.
#

try:
    project = setup.project_tree()
except esci.errors.ConfigurationError as exc:
    buildbot_config.error(str(exc))
else:
    log.msg("Project tree: {}".format(
        json.dumps(esci.rendering.describe(project), sort_keys=True)))

    # Workers, change sources, projects and checkout builders:
    esci.rendering.configure(
        c, project,
        poll_interval=setup.poll_interval,
        dsl_version=setup.dsl_version,
    )


#
# JANITORS
#

# Delete the build logs older than the log horizon to avoid clogging up the
# database:
c['configurators'] = [
    util.JanitorConfigurator(
        logHorizon=datetime.timedelta(weeks=12),
        dayOfWeek=0,  # on Sundays
        hour=12, minute=0,
    ),
]


#
# BUILDBOT SERVICES
#
# 'services' is a list of BuildbotService items like reporter targets.
#

c['services'] = []


# vim: set ft=python ts=4 sts=4 sw=4 tw=79 et:
