import pytest

from mongoseed.core import ErrorCollector, MultiError


class TestMultiError:
    def test_single_error_message(self):
        error = MultiError([ValueError("boom")])
        assert str(error) == "1 error occurred:\n\t* boom\n"

    def test_multiple_errors_message(self):
        error = MultiError([ValueError("first"), KeyError("second")])
        assert str(error) == "2 errors occurred:\n\t* first\n\t* 'second'\n"

    def test_keeps_order(self):
        first, second = ValueError("a"), ValueError("b")
        error = MultiError([first, second])
        assert error.errors == [first, second]
        assert list(error) == [first, second]
        assert len(error) == 2

    def test_equality_compares_causes(self):
        cause = ValueError("a")
        assert MultiError([cause]) == MultiError([cause])
        assert MultiError([cause]) != MultiError([ValueError("a")])
        assert MultiError([cause]) != cause

    def test_is_hashable(self):
        error = MultiError([ValueError("a")])
        assert error in {error}


class TestErrorCollector:
    def test_empty_collector_means_no_error(self):
        errors = ErrorCollector()
        assert len(errors) == 0
        assert errors.error_or_none() is None
        errors.raise_if_errors()

    def test_collects_every_error(self):
        errors = ErrorCollector()
        first, second = ValueError("a"), RuntimeError("b")
        errors.append(first)
        errors.append(second)

        assert len(errors) == 2
        with pytest.raises(MultiError) as exc_info:
            errors.raise_if_errors()
        assert exc_info.value.errors == [first, second]

    def test_nested_aggregates_are_flattened(self):
        first, second, third = ValueError("a"), ValueError("b"), ValueError("c")
        errors = ErrorCollector()
        errors.append(first)
        errors.append(MultiError([second, third]))

        assert len(errors) == 3
        assert errors.error_or_none().errors == [first, second, third]

    def test_error_or_none_returns_aggregate(self):
        errors = ErrorCollector()
        cause = ValueError("a")
        errors.append(cause)
        assert errors.error_or_none() == MultiError([cause])
