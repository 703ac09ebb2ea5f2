"""
JetBrains Mono Nerd Font into the per-user font directory.
"""

from __future__ import annotations

import logging
import shutil
import zipfile

from devsetup.adapters.base import InstallContext, Installer, Step
from devsetup.core.models.receipt import Receipt
from devsetup.core.services.probe import font_dir

logger = logging.getLogger(__name__)

FONT_URL = "https://github.com/ryanoasis/nerd-fonts/releases/download/v3.0.2/JetBrainsMono.zip"


class FontsInstaller(Installer):
    component = "fonts"

    def install(self, context: InstallContext) -> Receipt:
        if context.os == "windows":
            logger.warning("Font installation not supported on Windows outside WSL. Please install fonts manually.")
            return Receipt.skip(self.component, reason="unsupported on native Windows")
        if context.wsl:
            logger.warning("Installing fonts in WSL does not affect Windows. Please install fonts manually in Windows.")

        target = font_dir(context.os, context.home)
        if target is None:
            logger.warning("Unsupported OS for font installation: %s", context.os)
            return Receipt.skip(self.component, reason=f"unsupported OS {context.os}")

        archive = context.tmp_dir / "JetBrainsMono.zip"
        receipt = self.run_steps(context, [
            Step("Downloading JetBrains Mono Nerd Font", ["curl", "-fsSL", FONT_URL, "-o", str(archive)]),
        ])
        if not receipt.ok:
            return receipt
        if context.dry_run:
            logger.info("[dry-run] Would extract fonts into %s", target)
            return receipt

        try:
            installed = self._extract(archive, target)
        except (OSError, zipfile.BadZipFile) as e:
            return Receipt.failure(self.component, error=f"Failed to install JetBrains Mono Nerd Font: {e}")
        finally:
            archive.unlink(missing_ok=True)

        logger.info("JetBrains Mono Nerd Font installed (%d files).", installed)
        if context.os == "linux" and shutil.which("fc-cache"):
            context.runner.run(["fc-cache", "-f"])
        receipt.metadata["font_dir"] = str(target)
        return receipt

    @staticmethod
    def _extract(archive, target) -> int:
        target.mkdir(parents=True, exist_ok=True)
        count = 0
        with zipfile.ZipFile(archive) as zf:
            for member in zf.infolist():
                name = member.filename.rsplit("/", 1)[-1]
                if not name.lower().endswith(".ttf"):
                    continue
                with zf.open(member) as src, open(target / name, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                count += 1
        return count
