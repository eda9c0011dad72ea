"""Tests for the command-line interface."""

import json

import pytest
import yaml

from jobtracker.main import build_parser, format_records, main
from jobtracker.core.sync_coordinator import PULL_OFFLINE_MESSAGE

from conftest import make_record


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("JOBTRACKER_GOOGLE_TOKEN", raising=False)
    database_url = f"sqlite:///{tmp_path / 'data' / 'tracker.db'}"

    async def invoke(*args):
        return await main(["--database-url", database_url, "--offline", *args])

    return invoke


class TestParser:

    def test_connectivity_flags(self):
        parser = build_parser()

        assert parser.parse_args(["list"]).online is None
        assert parser.parse_args(["--offline", "list"]).online is False
        assert parser.parse_args(["--online", "list"]).online is True

    def test_status_choices_are_the_pipeline_stages(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["status", "1", "Ghosted"])
        with pytest.raises(SystemExit):
            build_parser().parse_args(["add", "Acme", "Dev", "--date", "2024-01-01", "--status", "Phone Scren"])
        with pytest.raises(SystemExit):
            build_parser().parse_args(["update", "1", "--status", "Offr Accepted"])

        args = build_parser().parse_args(["update", "1", "--status", "Offer Accepted"])
        assert args.status == "Offer Accepted"

    def test_format_records(self):
        assert format_records([]) == "No applications yet."

        line = format_records([make_record(5, "Acme", "Dev", salary="100k")])
        assert line.startswith("5  2024-01-15")
        assert line.endswith("Acme - Dev  (100k)")


@pytest.mark.asyncio
@pytest.mark.integration
class TestCommands:
    """End-to-end runs against a file-backed store."""

    async def test_add_then_list(self, run, capsys):
        assert await run("add", "Acme", "Backend Engineer", "--date", "2024-05-01", "--salary", "140k") == 0
        assert await run("list") == 0

        output = capsys.readouterr().out
        assert "Acme - Backend Engineer  (140k)" in output

    async def test_invalid_add_reports_errors(self, run, capsys):
        assert await run("add", "Acme", "Dev", "--date", "01/05/2024") == 1
        assert "Date must be in YYYY-MM-DD format" in capsys.readouterr().err

    async def test_unknown_status_filter(self, run, capsys):
        assert await run("list", "--status", "Ghosted") == 2
        assert "Unknown status filter" in capsys.readouterr().err

    async def test_pull_offline_keeps_cache(self, run, capsys):
        await run("add", "Acme", "Dev", "--date", "2024-01-01")
        await run("configure", "--spreadsheet-id", "abc")
        capsys.readouterr()

        assert await run("--token", "t", "pull") == 1
        assert PULL_OFFLINE_MESSAGE in capsys.readouterr().err

        await run("list")
        assert "Acme - Dev" in capsys.readouterr().out

    async def test_import_and_export(self, run, tmp_path, capsys):
        source = tmp_path / "in.json"
        source.write_text(json.dumps([
            {"id": 1, "company": "Acme", "position": "Dev", "date": "2024-01-01", "status": "Rejected"},
        ]))

        assert await run("import", str(source)) == 0
        assert await run("export", "-") == 0

        output = capsys.readouterr().out
        assert "Data imported successfully!" in output
        exported = json.loads(output[output.index("["):])
        assert exported[0]["status"] == "Rejected"

    async def test_status_and_delete(self, run, tmp_path, capsys):
        source = tmp_path / "in.json"
        source.write_text(json.dumps([{"id": 1, "company": "Acme", "position": "Dev", "date": "2024-01-01"}]))
        await run("import", str(source))

        assert await run("status", "1", "Phone Screen") == 0
        await run("list", "--status", "Phone Screen")
        assert "Acme - Dev" in capsys.readouterr().out

        assert await run("delete", "1") == 0
        await run("list")
        assert "No applications yet." in capsys.readouterr().out

    async def test_configure_from_env_and_save(self, run, tmp_path, monkeypatch):
        monkeypatch.setenv("JOBTRACKER_SPREADSHEET_ID", "env-sheet")
        monkeypatch.setenv("JOBTRACKER_RANGE", "Jobs!A:H")
        saved = tmp_path / "sheet.yaml"

        # signed out, so the pull after saving reports failure
        assert await run("configure", "--from-env", "--save-to", str(saved)) == 1

        assert yaml.safe_load(saved.read_text()) == {"spreadsheetId": "env-sheet", "range": "Jobs!A:H"}

        monkeypatch.delenv("JOBTRACKER_SPREADSHEET_ID")
        monkeypatch.delenv("JOBTRACKER_RANGE")
        assert await run("configure", "--from-file", str(saved), "--save-to", str(tmp_path / "copy.json")) == 1
        assert json.loads((tmp_path / "copy.json").read_text())["spreadsheetId"] == "env-sheet"
