"""
Component catalog and expected post-install artifacts.

Pure data, no logic. Ranks encode the install precedence: the version
manager first, then general utilities, languages, shell, editor, fonts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from devsetup.core.models.component import Component, validate_catalog

COMPONENTS: tuple[Component, ...] = validate_catalog([
    Component(
        id="mise",
        label="mise",
        description="Universal runtime manager (replaces nvm/pyenv/etc.)",
        precedence_rank=1,
    ),
    Component(
        id="cli_tools",
        label="CLI tools",
        description="Common CLI Tools (jq, ripgrep, htop, tmux, tree)",
        precedence_rank=2,
    ),
    Component(
        id="python",
        label="Python",
        description="Python 3.12+ (mise), uv, ruff, black",
        precedence_rank=3,
    ),
    Component(
        id="nodejs",
        label="Node.js",
        description="Node.js, Bun, pnpm (mise), npm global tools",
        precedence_rank=4,
    ),
    Component(
        id="go",
        label="Go",
        description="Go latest (mise), golangci-lint, Delve",
        precedence_rank=5,
    ),
    Component(
        id="rust",
        label="Rust",
        description="Rust latest (mise), Cargo tools, Rust CLI utils",
        precedence_rank=6,
    ),
    Component(
        id="zsh_shell",
        label="Zsh",
        description="Enhanced Zsh (Oh My Zsh, Powerlevel10k, plugins)",
        precedence_rank=7,
    ),
    Component(
        id="vscode_extensions",
        label="VS Code extensions",
        description="VS Code extensions (when code command available)",
        precedence_rank=8,
    ),
    Component(
        id="fonts",
        label="Nerd Fonts",
        description="Nerd Fonts (JetBrains Mono)",
        precedence_rank=9,
    ),
    Component(
        id="containers_info",
        label="Containers",
        description="Docker/Podman setup information",
        precedence_rank=10,
    ),
])


@dataclass(frozen=True)
class Artifact:
    """Something observable that a successful install leaves behind.

    ``names`` are alternatives: the artifact is present if any one of
    them is. Directory names may use ``{home}``, ``{zsh_custom}`` and
    ``{font_dir}`` placeholders.
    """

    kind: Literal["binary", "directory"]
    names: tuple[str, ...]

    @property
    def label(self) -> str:
        return " | ".join(self.names)


def _bins(*names: str) -> list[Artifact]:
    return [Artifact("binary", (name,)) for name in names]


EXPECTED_ARTIFACTS: dict[str, list[Artifact]] = {
    "mise": _bins("mise"),
    "python": [Artifact("binary", ("python", "python3"))] + _bins("uv", "ruff", "black"),
    "nodejs": _bins("node", "npm", "bun", "pnpm"),
    "go": _bins("go", "golangci-lint", "dlv"),
    "rust": _bins("cargo", "rustc", "rustfmt"),
    "cli_tools": _bins("jq", "rg", "htop", "tmux", "tree", "bat"),
    "zsh_shell": _bins("zsh") + [
        Artifact("directory", ("{home}/.oh-my-zsh",)),
        Artifact("directory", ("{zsh_custom}/themes/powerlevel10k",)),
    ],
    "fonts": [Artifact("directory", ("{font_dir}",))],
    # Informational components leave nothing to check.
    "vscode_extensions": [],
    "containers_info": [],
}

# Tools reported by ``devsetup check-tools``: (binary, description).
DEVELOPMENT_TOOLS: tuple[tuple[str, str], ...] = (
    ("git", "Git version control"),
    ("curl", "HTTP client"),
    ("wget", "File downloader"),
    ("vim", "Text editor"),
    ("zsh", "Z shell"),
    ("tmux", "Terminal multiplexer"),
    ("fzf", "Fuzzy finder"),
    ("jq", "JSON processor"),
    ("tree", "Directory tree viewer"),
    ("htop", "Process viewer"),
    ("mise", "Tool version manager"),
    ("python", "Python interpreter"),
    ("node", "Node.js runtime"),
    ("npm", "Node package manager"),
    ("go", "Go programming language"),
    ("rustc", "Rust compiler"),
    ("docker", "Container platform"),
)
