import json
import logging
import sys
from pathlib import Path

import pytest

from ember import ember_cli


def run(capsys: pytest.CaptureFixture[str], **kwargs: object) -> tuple[int, str, str]:
    code = ember_cli.run_ember(**kwargs)  # type: ignore[arg-type]
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_run_ember_string_input_prints_tree(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, err = run(capsys, source="1 + 2 * 3", is_string=True)
    assert code == 0
    assert out.splitlines() == [f"ember v{ember_cli.__version__}", "(do (+ 1 (* 2 3)))"]
    assert err == ""


def test_run_ember_quiet_skips_banner(capsys: pytest.CaptureFixture[str]) -> None:
    _, out, _ = run(capsys, source="x", is_string=True, quiet=True)
    assert out == "(do x)\n"


def test_run_ember_file_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "prog.em"
    path.write_text("# greet\nprint(\"héllo\")\n", encoding="utf-8")
    code, out, _ = run(capsys, source=str(path), quiet=True)
    assert code == 0
    assert out == '(do (print (params "héllo")))\n'


def test_run_ember_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, err = run(capsys, source=str(tmp_path / "nope.em"), quiet=True)
    assert code == ember_cli.EXIT_NOINPUT
    assert out == ""
    assert "Cannot read" in err


def test_run_ember_lexical_failure_is_fatal(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, err = run(capsys, source="1 + @", is_string=True, quiet=True)
    assert code == ember_cli.EXIT_DATAERR
    assert out == ""
    assert "[fatal] >>> Bad character '@' at line 1, col 5" in err


def test_run_ember_syntax_failure(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, err = run(capsys, source="x = 1 )", is_string=True, quiet=True)
    assert code == ember_cli.EXIT_SYNTAX
    assert out == ""
    assert "[error] >>> Unexpected token ')'" in err


def test_run_ember_partial_tree(capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = run(capsys, source="x = 1 )", is_string=True, quiet=True, partial=True)
    assert code == ember_cli.EXIT_SYNTAX
    assert out == "(do (= x 1))\n"


def test_run_ember_json(capsys: pytest.CaptureFixture[str]) -> None:
    _, out, _ = run(capsys, source="f(1)", is_string=True, quiet=True, fmt="json")
    payload = json.loads(out)
    assert payload["tag"] == "do"
    assert payload["children"][0]["node"] == "call"


def test_run_ember_indent(capsys: pytest.CaptureFixture[str]) -> None:
    _, out, _ = run(capsys, source="a = f(1)", is_string=True, quiet=True, indent=True)
    assert out == "(do\n  (=\n    a\n    (f\n      (params 1))))\n"


def test_run_ember_tokens(capsys: pytest.CaptureFixture[str]) -> None:
    _, out, _ = run(capsys, source="if x\n", is_string=True, quiet=True, show_tokens=True)
    assert out.splitlines() == ["1:1\top\tif", "1:4\tid\tx"]


def test_run_ember_output_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_path = tmp_path / "tree.txt"
    code, out, _ = run(capsys, source="[1, 2]", is_string=True, quiet=True, out=str(out_path))
    assert code == 0
    assert out == ""
    assert out_path.read_text(encoding="utf-8") == "(do (list 1 2))\n"


def test_run_ember_deep_nesting_is_a_syntax_failure(capsys: pytest.CaptureFixture[str]) -> None:
    source = "(" * 1000 + "1" + ")" * 1000
    code, out, err = run(capsys, source=source, is_string=True, quiet=True)
    assert code == ember_cli.EXIT_SYNTAX
    assert out == ""
    assert "[error] >>> Expression nested too deeply" in err


def test_run_ember_unwritable_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_path = tmp_path / "missing" / "tree.txt"
    code, out, err = run(capsys, source="1", is_string=True, quiet=True, out=str(out_path))
    assert code == ember_cli.EXIT_CANTCREAT
    assert out == ""
    assert "[error] >>> Cannot write" in err


def test_main_runs_pipeline(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "argv", ["ember", "-q", "-s", "a = b = 1"])
    with pytest.raises(SystemExit) as excinfo:
        ember_cli.main()
    assert excinfo.value.code == 0
    assert capsys.readouterr().out == "(do (= a (= b 1)))\n"


def test_main_reports_syntax_failure_code(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["ember", "-q", "-s", "+ +"])
    with pytest.raises(SystemExit) as excinfo:
        ember_cli.main()
    assert excinfo.value.code == ember_cli.EXIT_SYNTAX


def test_main_without_args_starts_repl(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(sys, "argv", ["ember"])
    monkeypatch.setattr("ember.ember_repl.start_repl", lambda **kw: calls.append(kw))
    ember_cli.main()
    assert calls == [{}]


def test_main_repl_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(sys, "argv", ["ember", "--repl", "--verbose"])
    monkeypatch.setattr("ember.ember_repl.start_repl", lambda **kw: calls.append(kw))
    ember_cli.main()
    assert calls == [{"verbose": True}]


def test_main_version(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "argv", ["ember", "--version"])
    with pytest.raises(SystemExit) as excinfo:
        ember_cli.main()
    assert excinfo.value.code == 0
    assert ember_cli.__version__ in capsys.readouterr().out


def test_main_rejects_unknown_format(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["ember", "-s", "1", "-f", "yaml"])
    with pytest.raises(SystemExit) as excinfo:
        ember_cli.main()
    assert excinfo.value.code == 2


@pytest.mark.parametrize(  # type: ignore[misc]
    "env,verbose,expected",
    [
        (None, False, logging.ERROR),
        ("debug", False, logging.DEBUG),
        ("warning", True, logging.DEBUG),
        ("bogus", False, logging.ERROR),
    ],
)
def test_configure_logging(
    monkeypatch: pytest.MonkeyPatch, env: str | None, verbose: bool, expected: int
) -> None:
    if env is None:
        monkeypatch.delenv("EMBER_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("EMBER_LOG_LEVEL", env)
    logger = logging.getLogger("ember")
    monkeypatch.setattr(logger, "level", logger.level)
    ember_cli.configure_logging(verbose)
    assert logger.level == expected
