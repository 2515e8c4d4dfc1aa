"""
Pytest configuration and fixtures for TAL compiler tests.

Provides reusable fixtures for:
- Building and running TAL programs in-process
- Verifying printed output
- Checking that a build or run fails with a given error
- Driving the CodeGenerator directly with hand-made tokens
"""

import pytest

import compiler


@pytest.fixture
def run_tal():
    """
    Fixture that returns a function to build and run TAL source.

    Usage:
        lines = run_tal(source_code)
        assert lines == ["42"]
    """
    def _run(source: str) -> list:
        gen = compiler.build(source)
        output = []
        gen.run(output.append)
        return output

    return _run


@pytest.fixture
def expect_output(run_tal):
    """
    Fixture that runs code and asserts the printed lines.

    Usage:
        expect_output(source_code, ["1", "2"])
    """
    def _expect(source: str, expected: list):
        output = run_tal(source)
        assert output == expected, \
            f"Output mismatch:\nExpected: {expected!r}\nGot: {output!r}"

    return _expect


@pytest.fixture
def expect_error(run_tal):
    """
    Fixture that verifies building or running fails with the given error.

    Usage:
        expect_error(bad_code, compiler.TypeMismatch, "incompatible types")
    """
    def _expect(source: str, error_type, error_substring: str = None):
        with pytest.raises(error_type) as excinfo:
            run_tal(source)
        if error_substring:
            assert error_substring.lower() in str(excinfo.value).lower(), \
                f"Expected error containing '{error_substring}' but got:\n{excinfo.value}"
        return excinfo.value

    return _expect


@pytest.fixture
def make_token():
    """Factory for tokens fed straight to the CodeGenerator."""
    def _make(text, kind='ID', line=1, column=1):
        return compiler.Token(kind, text, line, column)

    return _make


@pytest.fixture
def gen():
    return compiler.CodeGenerator()
