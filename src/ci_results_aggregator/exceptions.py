"""
Custom exceptions for the CI results aggregator.
"""


class AggregatorError(Exception):
    """Base exception for aggregator errors."""

    pass


class InvalidInputError(AggregatorError, ValueError):
    """Raised when the analyzer is given input outside the supported shapes."""

    pass


class RecordFormatError(AggregatorError):
    """Raised when a job records document cannot be parsed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid job records in {source}: {reason}")
