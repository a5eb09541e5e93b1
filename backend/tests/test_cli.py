"""
Tests for the maintenance CLI.
"""

from unittest.mock import patch

import pytest

from corpreg import cli


@pytest.fixture
def cli_session(db_session):
    """Point the CLI at the test database."""
    with patch("corpreg.cli.SessionLocal", return_value=db_session):
        yield db_session


class TestExport:

    def test_export_into_directory(self, cli_session, test_company_with_fiscal_year, tmp_path):
        assert cli.export_csv(tmp_path) is True

        files = list(tmp_path.glob("법인정보_*.csv"))
        assert len(files) == 1
        assert files[0].read_bytes().startswith(b"\xef\xbb\xbf")

    def test_export_to_file(self, cli_session, test_company, tmp_path):
        target = tmp_path / "out.csv"
        assert cli.export_csv(target) is True
        assert "테스트 주식회사" in target.read_text(encoding="utf-8-sig")

    def test_nothing_to_export(self, cli_session, tmp_path):
        assert cli.export_csv(tmp_path) is False
        assert list(tmp_path.iterdir()) == []


class TestList:

    def test_list(self, cli_session, test_company_with_fiscal_year, capsys):
        assert cli.list_companies() is True
        out = capsys.readouterr().out
        assert "테스트 주식회사 (110-81-12345)" in out
        assert "2022  20220101~20221231 *" in out


class TestClear:

    def test_clear_confirmed(self, cli_session, store, test_company, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda _: "y")
        assert cli.clear_all() is True
        assert store.all_companies() == []

    def test_clear_aborted(self, cli_session, store, test_company, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda _: "n")
        assert cli.clear_all() is False
        assert len(store.all_companies()) == 1


class TestServe:

    def test_serve_runs_uvicorn(self):
        with patch("corpreg.cli.uvicorn.run") as run:
            assert cli.serve(port=8080) is True
        run.assert_called_once_with("corpreg.main:app", host="127.0.0.1", port=8080)

    def test_serve_command_port(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["corpreg", "serve", "9000"])
        with patch("corpreg.cli.init_db"), patch("corpreg.cli.uvicorn.run") as run:
            cli.main()
        assert run.call_args.kwargs["port"] == 9000
