"""Tests for core.types: failure records and exceptions."""

import pytest

from verity.core.types import (
    AssertionEvent,
    AssertionFailedError,
    ConfigError,
    Failure,
    MultipleFailuresError,
    SourceLocation,
    UsageError,
    VerityError,
)


class TestFailure:
    def test_location_properties(self):
        src = SourceLocation("test_x.py", 12, "test_it", "that(a).is_(b)")
        f = Failure("boom", source=src)
        assert (f.file, f.line, f.code) == ("test_x.py", 12, "that(a).is_(b)")
        assert str(src) == "test_x.py:12"

    def test_without_source(self):
        f = Failure("boom")
        assert f.file is None and f.line is None and f.code is None
        assert str(f) == "boom"


class TestAssertionEvent:
    def test_for_failure(self):
        src = SourceLocation("a.py", 3, "fn")
        f = Failure("bad", source=src, assertion="is_")
        event = AssertionEvent.for_failure(f)
        assert not event.passed
        assert event.assertion == "is_"
        assert (event.file, event.line, event.message) == ("a.py", 3, "bad")

    def test_passed_event(self):
        event = AssertionEvent(passed=True)
        assert event.message is None and event.file is None


class TestExceptions:
    def test_hierarchy(self):
        assert issubclass(UsageError, VerityError)
        assert issubclass(ConfigError, UsageError)
        assert issubclass(ConfigError, ValueError)
        assert issubclass(MultipleFailuresError, AssertionFailedError)
        assert issubclass(AssertionFailedError, AssertionError)

    def test_assertion_failed_carries_failure(self):
        f = Failure("msg")
        err = AssertionFailedError("msg", f)
        assert err.failure is f
        assert str(err) == "msg"

    def test_multiple_failures_lists_errors(self):
        err = MultipleFailuresError("2 of 3 assertions failed in 'x'", [AssertionFailedError("a"), KeyError("b")])
        text = str(err)
        assert text.startswith("2 of 3 assertions failed in 'x'")
        assert "[1] AssertionFailedError: a" in text
        assert "[2] KeyError: 'b'" in text
        assert len(err.errors) == 2

    def test_raise_and_catch(self):
        with pytest.raises(AssertionError):
            raise AssertionFailedError("x")
