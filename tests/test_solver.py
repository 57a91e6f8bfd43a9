"""
Tests for the smtlisp-solve command line.

Errors on one line are logged and skipped; the remaining lines still
produce output.
"""

import io
import logging

from smtlisp_tool.solver import EXIT_IO_ERROR, EXIT_LINE_FAILED, EXIT_OK, main, solve_lines


class TestSolveLines:
    def test_outputs_and_stats(self):
        out = io.StringIO()
        stats = solve_lines(["(+ 2 3)", "", "(+ 1)", "(simplify -7)"], out=out)
        assert out.getvalue() == "5\n(- 7)\n"
        assert stats == {"lines": 4, "evaluated": 2, "blank": 1, "failed": 1}

    def test_failed_line_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="smtlisp_tool.solver"):
            solve_lines(["(foo 1)"], out=io.StringIO())
        assert "line 1: UnsupportedOperator" in caplog.text


class TestMain:
    def test_evaluates_given_file(self, tmp_path, capsys):
        path = tmp_path / "in.smt"
        path.write_text("(simplify (+ 1 (* 2 3)))\n(- 5 3)\n\n(simplify -5)\n", encoding="utf-8")
        assert main([str(path)]) == EXIT_OK
        assert capsys.readouterr().out == "7\n2\n(- 5)\n"

    def test_generates_when_no_file(self, tmp_path, capsys):
        fuzz = tmp_path / "fuzz.txt"
        code = main(["--count", "3", "--fuzz-file", str(fuzz), "--seed", "7"])
        assert code == EXIT_OK
        assert fuzz.exists()
        assert len(capsys.readouterr().out.splitlines()) == 3

    def test_failed_line_sets_exit_status(self, tmp_path, capsys):
        path = tmp_path / "in.smt"
        path.write_text("(+ 1)\n(* 2 2)\n", encoding="utf-8")
        assert main([str(path)]) == EXIT_LINE_FAILED
        assert capsys.readouterr().out == "4\n"

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "nope.smt")]) == EXIT_IO_ERROR

    def test_undecodable_file(self, tmp_path, capsys):
        path = tmp_path / "in.smt"
        path.write_bytes(b"(+ 1 2)\n(\xff+ 3 4)\n")
        assert main([str(path)]) == EXIT_IO_ERROR
        assert capsys.readouterr().out == ""

    def test_form_feed_stays_on_its_line(self, tmp_path, capsys):
        path = tmp_path / "in.smt"
        path.write_bytes(b"(+ 1\x0c 2)\n")
        assert main([str(path)]) == EXIT_OK
        assert capsys.readouterr().out == "3\n"

    def test_summary_and_trace(self, tmp_path, capsys):
        path = tmp_path / "in.smt"
        path.write_text("(+ 1 2)\n", encoding="utf-8")
        assert main([str(path), "--summary", "--trace", "1", "--table-style", "grid"]) == EXIT_OK
        err = capsys.readouterr().err
        assert "SMT Trace" in err
        assert "ADD  1 + 2 = 3" in err
        assert "Evaluated" in err
