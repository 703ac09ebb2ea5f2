"""
Tests for the interaction surface, UI backends, busy spinner and theme.
"""

import io
import subprocess

import click
import pytest

from devsetup.core.models.component import Component
from devsetup.ui import theme
from devsetup.ui.backends import (
    DialogBackend,
    FzfBackend,
    PlainBackend,
    WhiptailBackend,
    ZenityBackend,
    create_backend,
)
from devsetup.ui.backends.base import GaugeProcess
from devsetup.ui.backends.plain import parse_answer
from devsetup.ui.surface import InteractionSurface, percent_of

CATALOG = [
    Component(id="mise", label="mise", description="Runtime manager", precedence_rank=1),
    Component(id="python", label="Python", description="Python toolchain", precedence_rank=2),
    Component(id="fonts", label="Fonts", description="Nerd Font", default_selected=False),
]


class FakeRunner:
    """Stands in for ``subprocess.run``; records argv and keyword args."""

    def __init__(self, returncode=0, stdout="", stderr=""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls: list[tuple[list[str], dict]] = []

    def __call__(self, argv, **kwargs):
        self.calls.append((argv, kwargs))
        return subprocess.CompletedProcess(argv, self.returncode, self.stdout, self.stderr)


class FakeStdin:
    def __init__(self):
        self.written: list[str] = []
        self.closed = False

    def write(self, text):
        self.written.append(text)

    def flush(self):
        pass

    def close(self):
        self.closed = True


class FakeProc:
    def __init__(self, argv):
        self.argv = argv
        self.stdin = FakeStdin()
        self.waited = False

    def wait(self):
        self.waited = True
        return 0


class FakePopen:
    def __init__(self):
        self.procs: list[FakeProc] = []

    def __call__(self, argv, **kwargs):
        proc = FakeProc(argv)
        self.procs.append(proc)
        return proc


class TtyStream(io.StringIO):
    def isatty(self):
        return True


def _always(name):
    return f"/usr/bin/{name}"


def _never(name):
    return None


# ── Backends ────────────────────────────────────────────────────


class TestDialogBackend:
    def test_checklist_arguments(self):
        runner = FakeRunner(stderr="mise\n")
        DialogBackend(runner=runner, which=_always).select(CATALOG)
        argv, kwargs = runner.calls[0]
        assert argv[0] == "dialog"
        assert "--checklist" in argv and "--separate-output" in argv
        i = argv.index("mise")
        assert argv[i:i + 3] == ["mise", "Runtime manager", "ON"]
        j = argv.index("fonts")
        assert argv[j + 2] == "OFF"
        assert kwargs["stderr"] == subprocess.PIPE

    def test_reads_tags_from_stderr(self):
        runner = FakeRunner(stderr='mise\n"python"\n')
        selected = DialogBackend(runner=runner, which=_always).select(CATALOG)
        assert selected == frozenset({"mise", "python"})

    def test_cancel_is_empty(self):
        runner = FakeRunner(returncode=1, stderr="")
        assert DialogBackend(runner=runner, which=_always).select(CATALOG) == frozenset()

    def test_whiptail_uses_own_binary(self):
        runner = FakeRunner(stderr="python\n")
        backend = WhiptailBackend(runner=runner, which=_always)
        assert backend.select(CATALOG) == frozenset({"python"})
        assert runner.calls[0][0][0] == "whiptail"

    def test_gauge_lifecycle(self):
        popen = FakePopen()
        backend = DialogBackend(runner=FakeRunner(), which=_always, popen=popen)
        backend.show_progress(50, "Installing Python")
        backend.show_progress(100, "Done")
        assert len(popen.procs) == 1
        proc = popen.procs[0]
        assert "--gauge" in proc.argv
        assert proc.stdin.written[0] == "XXX\n50\nInstalling Python\nXXX\n"
        assert proc.stdin.closed and proc.waited

    def test_message(self):
        runner = FakeRunner()
        DialogBackend(runner=runner, which=_always).show_message("Done", "All good")
        assert runner.calls[0][0][:4] == ["dialog", "--title", "Done", "--msgbox"]


class TestZenityBackend:
    def test_reads_stdout(self):
        runner = FakeRunner(stdout="mise fonts\n")
        selected = ZenityBackend(runner=runner, which=_always).select(CATALOG)
        assert selected == frozenset({"mise", "fonts"})
        argv = runner.calls[0][0]
        assert "--checklist" in argv
        i = argv.index("python")
        assert argv[i - 1] == "TRUE"

    def test_cancel_is_empty(self):
        runner = FakeRunner(returncode=1)
        assert ZenityBackend(runner=runner, which=_always).select(CATALOG) == frozenset()

    def test_progress_feeds_percent(self):
        popen = FakePopen()
        backend = ZenityBackend(runner=FakeRunner(), which=_always, popen=popen)
        backend.show_progress(30, "Go")
        assert popen.procs[0].stdin.written == ["# Go\n30\n"]
        backend.close()
        assert popen.procs[0].stdin.closed


class TestFzfBackend:
    def test_parses_marked_lines(self):
        runner = FakeRunner(stdout="[✓] mise - Runtime manager\n[ ] fonts - Nerd Font\n")
        selected = FzfBackend(runner=runner, which=_always).select(CATALOG)
        assert selected == frozenset({"mise", "fonts"})
        argv, kwargs = runner.calls[0]
        assert "--multi" in argv
        assert "[ ] fonts - Nerd Font" in kwargs["input"]

    def test_escape_is_empty(self):
        runner = FakeRunner(returncode=130)
        assert FzfBackend(runner=runner, which=_always).select(CATALOG) == frozenset()


class TestPlainBackend:
    def test_blank_means_defaults(self):
        assert parse_answer("", CATALOG) == frozenset({"mise", "python"})

    def test_none_means_nothing(self):
        assert parse_answer("none", CATALOG) == frozenset()

    def test_numbers_and_ids(self):
        assert parse_answer("1, fonts", CATALOG) == frozenset({"mise", "fonts"})

    def test_unknown_tokens_ignored(self):
        assert parse_answer("python cobol 42", CATALOG) == frozenset({"python"})

    def test_select_prompts(self):
        backend = PlainBackend(prompt=lambda *a, **kw: "2")
        assert backend.select(CATALOG) == frozenset({"python"})

    def test_always_available(self):
        assert PlainBackend(which=_never).is_available()

    def test_progress_bar(self):
        stream = io.StringIO()
        PlainBackend(stream=stream).show_progress(100, "Installation complete")
        out = click.unstyle(stream.getvalue())
        assert "100% Installation complete" in out
        assert out.endswith("\n")


class TestCreateBackend:
    @pytest.mark.parametrize("name, cls", [
        ("dialog", DialogBackend),
        ("whiptail", WhiptailBackend),
        ("zenity", ZenityBackend),
        ("fzf", FzfBackend),
        ("plain", PlainBackend),
    ])
    def test_known(self, name, cls):
        assert isinstance(create_backend(name), cls)

    def test_unknown_is_plain(self):
        assert isinstance(create_backend("kdialog"), PlainBackend)


class TestGaugeProcess:
    def test_broken_pipe_closes(self):
        class BrokenStdin(FakeStdin):
            def write(self, text):
                raise BrokenPipeError()

        def popen(argv, **kwargs):
            proc = FakeProc(argv)
            proc.stdin = BrokenStdin()
            return proc

        gauge = GaugeProcess(["dialog", "--gauge"], lambda p, l: f"{p}\n", popen)
        gauge.update(10, "x")
        assert not gauge.active


# ── Surface ─────────────────────────────────────────────────────


class TestInteractionSurface:
    def test_percent(self):
        assert percent_of(1, 4) == 25
        assert percent_of(0, 0) == 100
        assert percent_of(5, 4) == 100

    def test_progress_writes_file(self, tmp_path):
        progress = tmp_path / "progress.txt"
        surface = InteractionSurface(PlainBackend(stream=io.StringIO()), progress_file=progress)
        assert surface.show_progress(1, 3, "mise") == 33
        assert progress.read_text() == "33\n"
        surface.show_progress(3, 3, "done")
        assert progress.read_text() == "100\n"

    def test_select_delegates(self):
        runner = FakeRunner(stderr="python\n")
        surface = InteractionSurface(DialogBackend(runner=runner, which=_always))
        assert surface.select_components(CATALOG) == frozenset({"python"})

    def test_vanished_binary_degrades_to_plain(self):
        fallback = PlainBackend(prompt=lambda *a, **kw: "none")
        surface = InteractionSurface(
            DialogBackend(runner=FakeRunner(), which=_never),
            fallback=lambda: fallback,
        )
        assert surface.select_components(CATALOG) == frozenset()
        assert surface.degraded
        assert surface.backend is fallback

    def test_file_not_found_degrades(self):
        def runner(argv, **kwargs):
            raise FileNotFoundError(argv[0])

        fallback = PlainBackend(prompt=lambda *a, **kw: "")
        surface = InteractionSurface(
            ZenityBackend(runner=runner, which=_always),
            fallback=lambda: fallback,
        )
        assert surface.select_components(CATALOG) == frozenset({"mise", "python"})
        assert surface.backend.name == "plain"

    def test_degradation_is_permanent(self):
        which_state = {"present": True}

        def which(name):
            return "/usr/bin/dialog" if which_state["present"] else None

        surface = InteractionSurface(
            DialogBackend(runner=FakeRunner(), which=which),
            fallback=lambda: PlainBackend(stream=io.StringIO()),
        )
        which_state["present"] = False
        surface.show_progress(1, 2, "a")
        which_state["present"] = True
        surface.show_progress(2, 2, "b")
        assert surface.backend.name == "plain"

    def test_busy_spins_on_plain_tty(self, progress_log):
        surface = InteractionSurface(PlainBackend(stream=TtyStream()))
        with surface.busy("Installing"):
            assert progress_log == ["start", "task:Installing"]
        assert progress_log[-1] == "stop"

    def test_busy_stops_on_interrupt(self, progress_log):
        surface = InteractionSurface(PlainBackend(stream=TtyStream()))
        with pytest.raises(KeyboardInterrupt):
            with surface.busy("Installing"):
                raise KeyboardInterrupt
        assert progress_log[-1] == "stop"

    def test_busy_noop_when_disabled(self, progress_log):
        surface = InteractionSurface(PlainBackend(stream=TtyStream()), spinner=False)
        with surface.busy("Installing"):
            pass
        assert progress_log == []

    def test_busy_noop_off_tty(self, progress_log):
        surface = InteractionSurface(PlainBackend(stream=io.StringIO()))
        with surface.busy("Installing"):
            pass
        assert progress_log == []

    def test_busy_with_rich_propagates_interrupt(self):
        surface = InteractionSurface(PlainBackend(stream=TtyStream()))
        with pytest.raises(KeyboardInterrupt):
            with surface.busy("Installing"):
                raise KeyboardInterrupt


class FakeProgress:
    def __init__(self, *columns, console=None, transient=False, log=None):
        self.log = log
        assert transient

    def __enter__(self):
        self.log.append("start")
        return self

    def __exit__(self, *exc):
        self.log.append("stop")
        return False

    def add_task(self, description, total=None):
        self.log.append(f"task:{description}")
        return 0


@pytest.fixture
def progress_log(monkeypatch) -> list[str]:
    log: list[str] = []
    monkeypatch.setattr(
        "devsetup.ui.surface.Progress",
        lambda *columns, **kwargs: FakeProgress(*columns, log=log, **kwargs),
    )
    return log


class TestTheme:
    def test_set_known(self):
        assert theme.set_theme("nord") == theme.PALETTES["nord"]
        theme.set_theme(theme.DEFAULT_THEME)

    def test_unknown_falls_back(self):
        assert theme.set_theme("solarized") == theme.PALETTES["catppuccin"]

    def test_style_keeps_text(self):
        assert click.unstyle(theme.style("ok", "green")) == "ok"
