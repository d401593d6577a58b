"""Tests for execution tracing and trace watchers."""

import io

import pytest

from plisp import (
    PLisp, PLispOptions, PLispEvaluator, PLispBufferingTraceWatcher, PLispFileTraceWatcher,
    PLispStreamTraceWatcher, PLispUndefinedBindingError
)


class TestExecutionTrace:
    """The evaluator reports each step to its trace watcher when tracing is enabled."""

    def test_trace_disabled_emits_nothing(self):
        """Test that no messages are sent unless tracing is on."""
        watcher = PLispBufferingTraceWatcher()
        PLisp(trace_watcher=watcher).run("(+ 1 2)")
        assert watcher.get_traces() == []

    def test_untraced_native_call_builds_no_list(self, monkeypatch):
        """Test that native arguments are only made into a list for a trace message."""
        def fail(elements):
            raise AssertionError(f"list built for {elements!r}")

        monkeypatch.setattr("plisp.plisp_evaluator.PLispList", fail)
        assert PLisp().evaluate("(+ 1 (* 2 3))") == 7

    def test_trace_enabled(self):
        """Test the messages for a simple application."""
        watcher = PLispBufferingTraceWatcher()
        plisp = PLisp(PLispOptions(trace_execution=True), trace_watcher=watcher)
        assert plisp.evaluate("(+ 1 2)") == 3

        traces = watcher.get_traces()
        assert traces[0] == "[TRACE] (+ 1 2) in <global>"
        assert "[TRACE] applying +" in traces
        assert "[TRACE] loading binding +" in traces
        assert "[TRACE] native + on (1 2)" in traces
        assert all(t.startswith("[TRACE] ") for t in traces)

    def test_trace_procedure_calls(self):
        """Test that definitions, branches and closure calls are traced."""
        watcher = PLispBufferingTraceWatcher()
        plisp = PLisp(PLispOptions(trace_execution=True), trace_watcher=watcher)
        plisp.run("(define pick [x] (if x 1 2)) (pick false)")

        traces = watcher.get_traces()
        assert "[TRACE] define procedure pick [x]" in traces
        assert "[TRACE] procedure #(pick x)" in traces
        assert "[TRACE]   (if x 1 2) in pick" in traces
        assert "[TRACE]   evaluating alternate" in traces
        assert "evaluating consequent" not in watcher.get_steps()

    def test_trace_indents_by_call_depth(self):
        """Test that steps inside nested calls are indented two spaces per call."""
        watcher = PLispBufferingTraceWatcher()
        plisp = PLisp(PLispOptions(trace_execution=True), trace_watcher=watcher)
        plisp.run("(define inner [] 1) (define outer [] (inner))")
        watcher.clear()
        plisp.run("(outer)")

        traces = watcher.get_traces()
        assert "[TRACE] procedure #(outer)" in traces
        assert "[TRACE]   procedure #(inner)" in traces
        assert "[TRACE]     1 in inner" in traces

    def test_call_depth_restored_after_error(self):
        """Test that a failing call does not leave later steps indented."""
        watcher = PLispBufferingTraceWatcher()
        plisp = PLisp(PLispOptions(trace_execution=True), trace_watcher=watcher)
        plisp.run("(define broken [] missing)")
        with pytest.raises(PLispUndefinedBindingError):
            plisp.run("(broken)")

        watcher.clear()
        plisp.run("5")
        assert watcher.get_traces() == ["[TRACE] 5 in <global>"]

    def test_trace_quote_and_lambda(self):
        """Test messages for quotation and closure creation."""
        watcher = PLispBufferingTraceWatcher()
        plisp = PLisp(PLispOptions(trace_execution=True), trace_watcher=watcher)
        plisp.run("(define q (quote (a b))) (lambda [] q)")

        traces = watcher.get_traces()
        assert "[TRACE] define q" in traces
        assert "[TRACE] quote of (a b)" in traces
        assert "[TRACE] q = (a b)" in traces
        assert "[TRACE] creating a closure in <global>" in traces

    def test_default_watcher_prints(self, capsys):
        """Test that tracing without a watcher prints to stdout."""
        evaluator = PLispEvaluator(PLispOptions(trace_execution=True))
        assert isinstance(evaluator.trace_watcher, PLispStreamTraceWatcher)

        env = evaluator.root_environment({})
        evaluator.evaluate_sequence(PLisp.parse("1"), env)
        assert capsys.readouterr().out == "[TRACE] 1 in <global>\n"

    def test_no_default_watcher_when_disabled(self):
        """Test that no watcher is created unless tracing is on."""
        assert PLispEvaluator().trace_watcher is None


class TestTraceWatchers:
    """The standard watcher implementations."""

    def test_buffering_watcher(self):
        """Test buffering, copying and clearing traces."""
        watcher = PLispBufferingTraceWatcher()
        watcher.on_trace("one")
        watcher.on_trace("two")

        traces = watcher.get_traces()
        assert traces == ["one", "two"]
        traces.append("three")
        assert watcher.get_traces() == ["one", "two"]

        watcher.clear()
        assert watcher.get_traces() == []

    def test_file_watcher(self, tmp_path):
        """Test that the file watcher writes one line per message."""
        path = tmp_path / "trace.log"
        with PLispFileTraceWatcher(str(path)) as watcher:
            plisp = PLisp(PLispOptions(trace_execution=True), trace_watcher=watcher)
            plisp.run("42")

        assert path.read_text(encoding='utf-8') == "[TRACE] 42 in <global>\n"

    def test_stdout_watcher(self, capsys):
        """Test that the stdout watcher prints each message."""
        PLispStreamTraceWatcher().on_trace("hello")
        assert capsys.readouterr().out == "hello\n"

    def test_stream_watcher(self):
        """Test writing traces to a given stream."""
        stream = io.StringIO()
        plisp = PLisp(PLispOptions(trace_execution=True), trace_watcher=PLispStreamTraceWatcher(stream))
        plisp.run("(define x 1)")
        assert stream.getvalue().splitlines() == [
            "[TRACE] (define x 1) in <global>",
            "[TRACE] define x",
            "[TRACE] 1 in <global>",
            "[TRACE] x = 1",
        ]

    def test_buffering_watcher_limit(self):
        """Test that a limited buffer keeps only the most recent messages."""
        watcher = PLispBufferingTraceWatcher(limit=2)
        for message in ["one", "two", "three"]:
            watcher.on_trace(message)

        assert watcher.get_traces() == ["two", "three"]

    def test_buffering_watcher_steps(self):
        """Test reading messages without prefix and indentation."""
        watcher = PLispBufferingTraceWatcher()
        watcher.on_trace("[TRACE] define x")
        watcher.on_trace("[TRACE]     1 in f")
        assert watcher.get_steps() == ["define x", "1 in f"]

    def test_file_watcher_unwritable_path(self, tmp_path):
        """Test that a trace file that cannot be created is reported."""
        with pytest.raises(OSError):
            PLispFileTraceWatcher(str(tmp_path / "no-such-dir" / "trace.log"))
