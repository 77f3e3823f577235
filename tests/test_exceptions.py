"""Tests for custom exceptions."""

from src.ci_results_aggregator.exceptions import (
    AggregatorError,
    InvalidInputError,
    RecordFormatError,
)


class TestAggregatorError:
    """Tests for base exception."""

    def test_is_exception(self):
        assert issubclass(AggregatorError, Exception)

    def test_message(self):
        err = AggregatorError("aggregation failed")
        assert str(err) == "aggregation failed"


class TestInvalidInputError:
    """Tests for invalid input error."""

    def test_inherits_from_base_and_value_error(self):
        assert issubclass(InvalidInputError, AggregatorError)
        assert issubclass(InvalidInputError, ValueError)


class TestRecordFormatError:
    """Tests for record format error."""

    def test_inherits_from_base(self):
        assert issubclass(RecordFormatError, AggregatorError)

    def test_attributes(self):
        err = RecordFormatError("jobs.yaml", "job entry is missing name")
        assert err.source == "jobs.yaml"
        assert err.reason == "job entry is missing name"
        assert "jobs.yaml" in str(err)
        assert "missing name" in str(err)
