"""
Custom exceptions for the Lambda Memory Bench package.
"""


class BenchmarkError(Exception):
    """Base exception for all benchmark-related errors."""
    pass


class ConfigurationError(BenchmarkError):
    """Raised when there's an error in the configuration."""
    pass


class MalformedResponseError(BenchmarkError):
    """Raised when a function response does not match the expected envelope."""
    pass


class BatchTransportError(BenchmarkError):
    """Raised when every request in a batch failed at the transport level."""
    pass


class InsufficientDataError(BenchmarkError):
    """Raised when a computation needs samples that were never collected."""
    pass


class CostModelError(BenchmarkError):
    """Raised when cost figures cannot be derived from the given inputs."""
    pass


class ReportGenerationError(BenchmarkError):
    """Raised when report generation fails."""
    pass
