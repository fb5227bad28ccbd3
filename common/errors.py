"""
Exception hierarchy for the ListObjects benchmark harness.
"""


class BenchmarkError(Exception):
    """Base class for all harness errors."""

    exit_code = 1


class ConfigurationError(BenchmarkError):
    """An environment override or command-line value is invalid."""

    exit_code = 2


class ToolMissingError(BenchmarkError):
    """A required external command-line tool is not installed."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Missing required tools: {', '.join(self.missing)}")


class EndpointUnreachableError(BenchmarkError):
    """The storage endpoint did not answer a basic listing call."""

    def __init__(self, endpoint: str, reason: str = ""):
        self.endpoint = endpoint
        message = f"Cannot connect to S3 endpoint at {endpoint}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NoEligibleWorkError(BenchmarkError):
    """Every trial of a benchmark phase was skipped."""

    def __init__(self, label: str, skipped=None):
        self.label = label
        self.skipped = list(skipped or [])
        super().__init__(f"No eligible buckets for '{label}'. Run seed first.")


class TimingRunnerError(BenchmarkError):
    """The statistical timing runner exited unsuccessfully."""
