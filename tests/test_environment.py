"""
Tests for the environment builder and the command catalog.
"""

import pytest

from spicectl.adapters.shell.catalog import CommandCatalog, render
from spicectl.adapters.shell.environment import build_environment
from spicectl.core.models.config import ToolConfig


class TestBuildEnvironment:
    """Override merge versus PATH augmentation."""

    def test_default_prepends_candidate_dirs_in_order(self):
        env = build_environment(base={"HOME": "/home/u", "PATH": "/usr/bin:/bin"})
        assert env["PATH"] == (
            "/home/u/.spicetify:/home/u/.local/bin:/usr/local/bin:/opt/homebrew/bin"
            ":/usr/bin:/bin"
        )

    def test_default_leaves_other_variables(self):
        env = build_environment(base={"HOME": "/h", "PATH": "/bin", "LANG": "C"})
        assert env["LANG"] == "C"
        assert env["HOME"] == "/h"

    def test_missing_path_uses_candidates_only(self):
        env = build_environment(extra_path_dirs=["/opt/a", "/opt/b"], base={})
        assert env["PATH"] == "/opt/a:/opt/b"

    def test_override_merges_and_wins(self):
        base = {"A": "1", "PATH": "/bin"}
        env = build_environment({"A": "2", "B": "3"}, base=base)
        assert env == {"A": "2", "B": "3", "PATH": "/bin"}

    def test_override_skips_path_augmentation(self):
        """An explicit override is used as-is; PATH is not rewritten."""
        env = build_environment({}, base={"HOME": "/h", "PATH": "/bin"})
        assert env["PATH"] == "/bin"

    def test_inputs_not_mutated(self):
        base = {"HOME": "/h", "PATH": "/bin"}
        override = {"X": "1"}
        build_environment(override, base=base)
        build_environment(base=base)
        assert base == {"HOME": "/h", "PATH": "/bin"}
        assert override == {"X": "1"}

    def test_inherits_process_environment(self, monkeypatch):
        monkeypatch.setenv("SPICECTL_INHERITED", "yes")
        env = build_environment()
        assert env["SPICECTL_INHERITED"] == "yes"


class TestCommandCatalog:
    """Rendered catalog commands are fixed and shell-quoted."""

    @pytest.fixture
    def catalog(self) -> CommandCatalog:
        return CommandCatalog.from_config(ToolConfig())

    def test_fixed_commands(self, catalog):
        assert catalog.version == "spicetify -v"
        assert catalog.exists == "command -v spicetify"
        assert catalog.backup == "spicetify backup"
        assert catalog.apply == "spicetify apply"
        assert catalog.restore == "spicetify restore"
        assert catalog.host_running == "pgrep -x Spotify"
        assert catalog.host_kill == "killall Spotify"

    def test_bootstrap_pipeline(self, catalog):
        assert catalog.bootstrap == (
            "curl -fsSL "
            "https://raw.githubusercontent.com/spicetify/spicetify-cli/master/install.sh | sh"
        )

    def test_values_are_quoted(self):
        """Configured names cannot inject shell syntax."""
        catalog = CommandCatalog(
            tool="spicetify",
            host="Spotify; rm -rf ~",
            script_url="https://example.com/x.sh$(whoami)",
        )
        assert catalog.host_kill == "killall 'Spotify; rm -rf ~'"
        assert catalog.bootstrap == "curl -fsSL 'https://example.com/x.sh$(whoami)' | sh"

    def test_unknown_command(self):
        with pytest.raises(KeyError):
            render("format-disk", tool="x")
