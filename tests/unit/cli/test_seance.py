"""Unit tests for the seance command."""

import json
from pathlib import Path

import pytest
from ripctl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def buried(graveyard: Path, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    """Bury two files from workdir."""
    monkeypatch.chdir(workdir)
    (workdir / "a").write_text("a")
    (workdir / "sub").mkdir()
    (workdir / "sub" / "b").write_text("b")
    result = runner.invoke(app, ["--graveyard", str(graveyard), "bury", "a", "sub/b"])
    assert result.exit_code == 0, result.output
    return [workdir / "a", workdir / "sub" / "b"]


class TestSeanceCommand:
    """Tests for ripctl seance."""

    def test_json_lists_graves(self, graveyard: Path, buried: list[Path]) -> None:
        """--json prints original and grave of every entry under cwd."""
        result = runner.invoke(app, ["--graveyard", str(graveyard), "seance", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [item["original"] for item in data] == [str(p) for p in buried]
        assert data[0]["grave"] == str(graveyard / str(buried[0]).lstrip("/"))

    def test_scoped_to_cwd(
        self,
        graveyard: Path,
        workdir: Path,
        buried: list[Path],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Only graves from under the working directory are listed."""
        (workdir / "sub").mkdir(exist_ok=True)
        monkeypatch.chdir(workdir / "sub")

        result = runner.invoke(app, ["--graveyard", str(graveyard), "seance", "--json"])

        data = json.loads(result.output)
        assert [item["original"] for item in data] == [str(buried[1])]

    def test_table_output(self, graveyard: Path, buried: list[Path]) -> None:
        """Without --json a table is printed."""
        result = runner.invoke(app, ["--graveyard", str(graveyard), "seance"])

        assert result.exit_code == 0, result.output
        assert "Graves" in result.output
        assert "Original" in result.output

    def test_no_graves(self, graveyard: Path, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """An empty graveyard says so."""
        monkeypatch.chdir(workdir)

        result = runner.invoke(app, ["--graveyard", str(graveyard), "seance"])

        assert result.exit_code == 0, result.output
        assert "No graves here." in result.output
