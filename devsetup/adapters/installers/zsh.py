"""
Zsh with Oh My Zsh, Powerlevel10k and the usual plugins.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from devsetup.adapters.base import InstallContext, Installer, Step
from devsetup.adapters.installers import packages
from devsetup.core.models.receipt import Receipt
from devsetup.core.persistence.run_files import run_timestamp

logger = logging.getLogger(__name__)

OH_MY_ZSH_INSTALL = (
    'sh -c "$(curl -fsSL https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh)"'
    " \"\" --unattended"
)

_REPOS = (
    ("themes/powerlevel10k", "https://github.com/romkatv/powerlevel10k.git", True),
    ("plugins/zsh-autosuggestions", "https://github.com/zsh-users/zsh-autosuggestions", False),
    ("plugins/zsh-syntax-highlighting", "https://github.com/zsh-users/zsh-syntax-highlighting.git", False),
)

ZSHRC_TEMPLATE = """\
# Enable Powerlevel10k instant prompt
if [[ -r "${XDG_CACHE_HOME:-$HOME/.cache}/p10k-instant-prompt-${(%):-%n}.zsh" ]]; then
  source "${XDG_CACHE_HOME:-$HOME/.cache}/p10k-instant-prompt-${(%):-%n}.zsh"
fi

export ZSH="$HOME/.oh-my-zsh"
ZSH_THEME="powerlevel10k/powerlevel10k"
plugins=(git zsh-autosuggestions zsh-syntax-highlighting fzf)
source $ZSH/oh-my-zsh.sh

export PATH="$HOME/.local/bin:$PATH"
command -v mise >/dev/null && eval "$(mise activate zsh)"
[ -f ~/.fzf.zsh ] && source ~/.fzf.zsh

alias ll='ls -alF'
alias la='ls -A'
alias gs='git status'

[[ ! -f ~/.p10k.zsh ]] || source ~/.p10k.zsh
"""


def zsh_custom_dir(home: Path) -> Path:
    return Path(os.environ.get("ZSH_CUSTOM") or home / ".oh-my-zsh" / "custom")


class ZshInstaller(Installer):
    component = "zsh_shell"

    def install(self, context: InstallContext) -> Receipt:
        steps: list[Step] = []

        if not shutil.which("zsh"):
            pm = context.package_manager
            if not packages.supports(pm):
                return Receipt.failure(
                    self.component,
                    error=f"Unsupported package manager '{pm}' for Zsh installation.",
                )
            cmd, sudo = packages.install_command(pm, ["zsh"])
            steps.append(Step("Installing zsh", cmd, needs_sudo=sudo))

        zsh_path = shutil.which("zsh") or "/bin/zsh"
        if Path(os.environ.get("SHELL", "")).name != "zsh":
            steps.append(Step("Changing default login shell to zsh", ["chsh", "-s", zsh_path], required=False))

        if not (context.home / ".oh-my-zsh").is_dir():
            steps.append(Step("Installing Oh My Zsh", OH_MY_ZSH_INSTALL, shell=True))
        else:
            logger.info("Oh My Zsh already installed.")

        custom = zsh_custom_dir(context.home)
        for rel, url, required in _REPOS:
            target = custom / rel
            if target.is_dir():
                continue
            steps.append(Step(
                f"Cloning {target.name}",
                ["git", "clone", "--depth=1", url, str(target)],
                required=required,
            ))

        receipt = self.run_steps(context, steps)
        if not receipt.ok:
            return receipt

        if context.dry_run:
            logger.info("[dry-run] Would write %s", context.home / ".zshrc")
            return receipt

        self._write_zshrc(context.home)
        logger.info("Zsh shell setup completed. Start using it with: exec zsh")
        return receipt

    @staticmethod
    def _write_zshrc(home: Path) -> None:
        zshrc = home / ".zshrc"
        if zshrc.is_file():
            backup = home / f".zshrc.backup.{run_timestamp()}"
            shutil.copy2(zshrc, backup)
            logger.info("Existing .zshrc saved as %s", backup.name)
        zshrc.write_text(ZSHRC_TEMPLATE, encoding="utf-8")
