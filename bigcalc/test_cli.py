# test_cli.py

import pytest

from bigcalc import cli


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    levels = []
    monkeypatch.setattr(cli, "configure_logging", levels.append)
    return levels


class FakeREPL:
    instances = []

    def __init__(self, settings):
        self.settings = settings
        self.ran = False
        FakeREPL.instances.append(self)

    def repl_loop(self):
        self.ran = True


def test_expression_option_prints_result(capsys):
    assert cli.main(["-e", "2 ^ 100"]) == 0
    assert capsys.readouterr().out.strip() == "1267650600228229401496703205376"


def test_expression_option_reports_error(capsys):
    assert cli.main(["--expression", "1 + 2) * 3"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("[ParseError]")


def test_invalid_configuration_exits_with_2(capsys, monkeypatch):
    monkeypatch.setenv("BIGCALC_POOL_CAPACITY", "0")
    assert cli.main(["-e", "1"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


def test_debug_flag_sets_debug_logging(no_logging_setup):
    assert cli.main(["--debug", "-e", "1"]) == 0
    assert no_logging_setup == ["DEBUG"]


def test_log_level_option(no_logging_setup):
    assert cli.main(["--log-level", "info", "-e", "1"]) == 0
    assert no_logging_setup == ["INFO"]


def test_without_expression_starts_repl(monkeypatch, tmp_path):
    FakeREPL.instances = []
    monkeypatch.setattr(cli, "REPL", FakeREPL)
    history = str(tmp_path / "hist")
    assert cli.main(["--no-color", "--history-file", history]) == 0
    repl = FakeREPL.instances[0]
    assert repl.ran
    assert repl.settings.color is False
    assert repl.settings.history_file == history


def test_build_parser_defaults_leave_settings_alone():
    args = cli.build_parser().parse_args([])
    assert args.debug is None
    assert args.color is None
    assert args.expression is None
