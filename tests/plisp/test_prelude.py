"""Tests for the standard native functions."""

import io

import pytest

from plisp import PLisp, PLispNativeError, PLispNativeFunction, PLispPrelude, NIL


class TestPreludeTable:
    """The native table the global environment starts with."""

    def test_natives_are_named_functions(self):
        """Test that every entry is a native function named after its binding."""
        natives = PLispPrelude(lambda callee, args: NIL).get_natives()
        assert {"display", "+", "=", "and", "string-join", "list", "map", "reduce"} <= set(natives)
        for name, native in natives.items():
            assert isinstance(native, PLispNativeFunction)
            assert native.name == name

    def test_native_description(self, plisp):
        """Test how natives are shown."""
        assert plisp.evaluate_and_format("+") == "#<native +>"
        assert plisp.evaluate_and_format("string-join") == "#<native string-join>"


class TestMath:
    """Arithmetic, comparison and boolean natives."""

    @pytest.mark.parametrize("expression,expected", [
        ("(+ 1 2 3)", "6"),
        ("(+)", "0"),
        ("(+ 1.5 1)", "2.5"),
        ("(- 10 3 2)", "5"),
        ("(- 5)", "-5"),
        ("(* 2 3 4)", "24"),
        ("(*)", "1"),
        ("(/ 12 3)", "4"),
        ("(/ 7 2)", "3.5"),
        ("(/ 2)", "0.5"),
        ("(/ 100 5 2)", "10"),
        ("(= 1 1 1)", "true"),
        ("(= 1 2)", "false"),
        ("(= 2 2.0)", "true"),
        ('(= "a" "a")', "true"),
        ('(= 1 "1")', "false"),
        ("(= nil nil)", "true"),
        ("(not= 1 2)", "true"),
        ("(not= 1 1)", "false"),
        ("(< 1 2 3)", "true"),
        ("(< 1 3 2)", "false"),
        ("(<= 1 1 2)", "true"),
        ("(> 3 2 1)", "true"),
        ("(>= 3 3 1)", "true"),
        ("(>= 1 2)", "false"),
        ("(number? 1)", "true"),
        ('(number? "1")', "false"),
        ("(not false)", "true"),
        ("(not nil)", "false"),
        ("(not 0)", "false"),
        ("(and 1 2)", "2"),
        ("(and 1 false 2)", "false"),
        ("(and)", "true"),
        ("(or false 2)", "2"),
        ("(or false false)", "false"),
        ("(or nil false)", "nil"),
        ("(or)", "false"),
    ])
    def test_math(self, plisp, expression, expected):
        """Test math and boolean natives."""
        assert plisp.evaluate_and_format(expression) == expected

    @pytest.mark.parametrize("expression,cause", [
        ('(+ 1 "a")', TypeError),
        ("(- )", TypeError),
        ("(< 1 nil)", TypeError),
        ("(/ 1 0)", ZeroDivisionError),
        ("(/ 1.0 0)", ZeroDivisionError),
        ("(not 1 2)", TypeError),
        ("(number?)", TypeError),
    ])
    def test_math_failures(self, plisp, expression, cause):
        """Test that bad arguments fail as native errors."""
        with pytest.raises(PLispNativeError) as exc_info:
            plisp.run(expression)

        assert isinstance(exc_info.value.cause, cause)


class TestStrings:
    """String natives."""

    @pytest.mark.parametrize("expression,expected", [
        ('(string-join ", " (list "a" "b" "c"))', '"a, b, c"'),
        ('(string-join (list "a" 1 true))', '"a1true"'),
        ('(string-join "-" (list))', '""'),
        ('(string-split "a,b,,c" ",")', '("a" "b" "" "c")'),
        ('(string-split "a1b22c" "[0-9]+")', '("a" "b" "c")'),
        ('(string-upcase "Hello")', '"HELLO"'),
        ('(string-downcase "Hello")', '"hello"'),
        ('(string-reverse "abc")', '"cba"'),
        ('(string-trim "  padded \\n")', '"padded"'),
        ('(starts-with? "pocket lisp" "pocket")', "true"),
        ('(starts-with? "pocket lisp" "lisp")', "false"),
        ('(ends-with? "pocket lisp" "lisp")', "true"),
        ('(ends-with? "pocket lisp" "pocket")', "false"),
    ])
    def test_strings(self, plisp, expression, expected):
        """Test string natives."""
        assert plisp.evaluate_and_format(expression) == expected

    @pytest.mark.parametrize("expression", [
        "(string-upcase 1)",
        '(string-join "," "not a list")',
        '(string-split "abc")',
        '(starts-with? "abc" 1)',
    ])
    def test_string_failures(self, plisp, expression):
        """Test that string natives reject bad arguments."""
        with pytest.raises(PLispNativeError) as exc_info:
            plisp.run(expression)

        assert isinstance(exc_info.value.cause, TypeError)


class TestLists:
    """List natives, including the higher-order ones."""

    @pytest.mark.parametrize("expression,expected", [
        ("(list)", "()"),
        ('(list 1 "a" true nil)', '(1 "a" true nil)'),
        ("(list (list 1) (list))", "((1) ())"),
        ("(first (list 1 2))", "1"),
        ("(first (list))", "nil"),
        ("(first nil)", "nil"),
        ("(rest (list 1 2 3))", "(2 3)"),
        ("(rest (list))", "()"),
        ("(nth (list 1 2 3) 1)", "2"),
        ("(take 2 (list 1 2 3))", "(1 2)"),
        ("(take 5 (list 1))", "(1)"),
        ("(drop 2 (list 1 2 3))", "(3)"),
        ("(drop 0 (list 1))", "(1)"),
        ("(count (list 1 2))", "2"),
        ('(count "abc")', "3"),
        ("(count nil)", "0"),
        ("(map (lambda [x] (* x x)) (list 1 2 3))", "(1 4 9)"),
        ("(map + (list 1 2) (list 10 20 30))", "(11 22)"),
        ("(map first (list))", "()"),
        ("(filter (lambda [x] (> x 1)) (list 1 2 3))", "(2 3)"),
        ("(filter (lambda [x] nil) (list 1 2))", "(1 2)"),
        ("(reduce + (list 1 2 3))", "6"),
        ("(reduce + 10 (list 1 2))", "13"),
        ("(reduce + (list))", "0"),
        ("(reduce + (list 7))", "7"),
        ("(reduce (lambda [acc x] (list x acc)) nil (list 1 2))", "(2 (1 nil))"),
        ("(flatmap (lambda [x] (list x x)) (list 1 2))", "(1 1 2 2)"),
    ])
    def test_lists(self, plisp, expression, expected):
        """Test list natives."""
        assert plisp.evaluate_and_format(expression) == expected

    def test_list_to_python(self, plisp):
        """Test that lists convert to Python lists recursively."""
        assert plisp.evaluate('(list 1 (list "a" nil) true)') == [1, ["a", None], True]

    @pytest.mark.parametrize("expression,cause", [
        ("(nth (list 1) 5)", IndexError),
        ("(nth (list 1) (- 1))", IndexError),
        ("(nth (list 1) 0.5)", TypeError),
        ("(first 1)", TypeError),
        ("(first (list 1) (list 2))", TypeError),
        ("(map (lambda [x] x))", TypeError),
        ("(reduce +)", TypeError),
        ("(flatmap (lambda [x] x) (list 1))", TypeError),
    ])
    def test_list_failures(self, plisp, expression, cause):
        """Test that list natives reject bad arguments."""
        with pytest.raises(PLispNativeError) as exc_info:
            plisp.run(expression)

        assert isinstance(exc_info.value.cause, cause)


class TestIO:
    """Display and file natives."""

    def test_display(self):
        """Test that display writes its arguments and returns nil."""
        output = io.StringIO()
        plisp = PLisp(output=output)
        assert plisp.evaluate('(display "total:" (+ 1 2) "items" (list "a" 1) nil)') is None
        assert output.getvalue() == 'total: 3 items ("a" 1) nil\n'

    def test_display_without_arguments(self):
        """Test that display with nothing prints an empty line."""
        output = io.StringIO()
        PLisp(output=output).run("(display)")
        assert output.getvalue() == "\n"

    def test_display_defaults_to_stdout(self, capsys):
        """Test that display prints to stdout when no stream is given."""
        PLisp().run('(display "to stdout")')
        assert capsys.readouterr().out == "to stdout\n"

    def test_write_then_read_file(self, plisp, tmp_path):
        """Test writing a file and reading it back."""
        path = tmp_path / "out.txt"
        assert plisp.evaluate(f'(write-file "{path}" "line one\\nline two")') is None
        assert path.read_text(encoding='utf-8') == "line one\nline two"
        assert plisp.evaluate(f'(read-file "{path}")') == "line one\nline two"

    def test_write_file_displays_non_strings(self, plisp, tmp_path):
        """Test that non-string content is written as displayed."""
        path = tmp_path / "list.txt"
        plisp.run(f'(write-file "{path}" (list 1 2))')
        assert path.read_text(encoding='utf-8') == "(1 2)"

    def test_read_missing_file(self, plisp, tmp_path):
        """Test that a missing file fails as a native error."""
        missing = tmp_path / "missing.txt"
        with pytest.raises(PLispNativeError) as exc_info:
            plisp.run(f'(read-file "{missing}")')

        assert isinstance(exc_info.value.cause, FileNotFoundError)
