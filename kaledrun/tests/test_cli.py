"""
Tests for the command-line interface.
"""

import pytest

from ..cli import main


class TestCLI:
    """Tests for CLI commands."""

    def test_validate(self, capsys):
        """The built-in catalog validates."""
        main(["validate"])
        assert "Catalog is valid" in capsys.readouterr().out

    def test_simulate(self, capsys):
        """A seeded simulation prints its seed and policy."""
        main(["simulate", "--seed", "11", "--steps", "40", "--policy", "first"])
        out = capsys.readouterr().out
        assert "Seed: 11" in out
        assert "Decisions:" in out

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1
