"""Built-in component installers, one per catalog entry."""

from devsetup.adapters.installers.cli_tools import CliToolsInstaller
from devsetup.adapters.installers.containers import ContainersInfoInstaller
from devsetup.adapters.installers.editors import VSCodeExtensionsInstaller
from devsetup.adapters.installers.fonts import FontsInstaller
from devsetup.adapters.installers.languages import (
    GoInstaller,
    NodeInstaller,
    PythonInstaller,
    RustInstaller,
)
from devsetup.adapters.installers.mise import MiseInstaller
from devsetup.adapters.installers.zsh import ZshInstaller

BUILTIN_INSTALLERS = (
    MiseInstaller,
    CliToolsInstaller,
    PythonInstaller,
    NodeInstaller,
    GoInstaller,
    RustInstaller,
    ZshInstaller,
    VSCodeExtensionsInstaller,
    FontsInstaller,
    ContainersInfoInstaller,
)

__all__ = ["BUILTIN_INSTALLERS"]
