"""
Docker/Podman — informational only; nothing is installed on the host.
"""

from __future__ import annotations

import logging
import shutil

from devsetup.adapters.base import InstallContext, Installer
from devsetup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class ContainersInfoInstaller(Installer):
    component = "containers_info"

    def install(self, context: InstallContext) -> Receipt:
        logger.info("Docker/Podman installation on the host must be handled manually.")
        found: dict[str, str] = {}

        if shutil.which("docker"):
            version = context.runner.run(["docker", "--version"])
            found["docker"] = version.stdout or "installed"
            logger.info("Docker is already installed: %s", found["docker"])
        else:
            logger.info("Docker is not installed: https://docs.docker.com/get-docker/")
            logger.info("Podman alternative: https://podman.io/getting-started/installation")

        if shutil.which("docker-compose"):
            found["compose"] = "docker-compose"
        elif "docker" in found and context.runner.run(["docker", "compose", "version"]).ok:
            found["compose"] = "docker compose plugin"
        else:
            logger.info("Docker Compose is not installed: https://docs.docker.com/compose/install/")

        return Receipt.success(self.component, output="containers info reported", metadata=found)
