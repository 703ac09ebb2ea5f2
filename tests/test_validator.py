"""
Tests for post-install validation.
"""

from pathlib import Path

from devsetup.core.data.catalog import Artifact
from devsetup.core.services.validator import validate


def _which_of(*available: str):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestValidate:
    def test_empty_selection(self):
        report = validate(frozenset(), which=_which_of())
        assert (report.passed, report.failed) == (0, 0)
        assert report.all_ok

    def test_only_selected_components_checked(self):
        report = validate({"mise"}, which=_which_of("mise", "go"))
        assert (report.passed, report.failed) == (1, 0)
        assert {c.component for c in report.checks} == {"mise"}

    def test_missing_binary_counts_as_failed(self):
        report = validate({"rust"}, which=_which_of("cargo"))
        assert report.passed == 1
        assert report.failed == 2

    def test_alternative_names(self):
        report = validate({"python"}, which=_which_of("python3", "uv", "ruff", "black"))
        assert report.failed == 0

    def test_directory_checks(self, home: Path):
        (home / ".oh-my-zsh" / "custom" / "themes" / "powerlevel10k").mkdir(parents=True)
        report = validate({"zsh_shell"}, which=_which_of("zsh"), home=home)
        assert (report.passed, report.failed) == (3, 0)

    def test_font_check_skipped_without_font_dir(self, home: Path):
        report = validate({"fonts"}, which=_which_of(), home=home, font_dir=None)
        assert report.checks == []

    def test_font_dir_missing(self, home: Path):
        report = validate({"fonts"}, which=_which_of(), home=home, font_dir=home / "fonts")
        assert report.failed == 1

    def test_informational_components(self):
        report = validate({"vscode_extensions", "containers_info"}, which=_which_of())
        assert (report.passed, report.failed) == (0, 0)

    def test_unknown_component_ignored(self):
        report = validate({"cobol"}, which=_which_of())
        assert report.checks == []

    def test_never_raises(self):
        def broken_which(name):
            raise RuntimeError("PATH exploded")

        report = validate({"mise"}, which=broken_which)
        assert report.failed == 1
        assert "check error" in report.checks[0].detail

    def test_custom_checks(self, tmp_path: Path):
        checks = {"tool": [Artifact("directory", (str(tmp_path),))]}
        report = validate({"tool"}, checks=checks, which=_which_of())
        assert report.passed == 1
