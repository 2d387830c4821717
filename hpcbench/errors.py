"""Error taxonomy for microbenchmark execution."""


class MicrobenchmarkError(Exception):
    """Base exception for microbenchmark errors."""

    pass


class MicrobenchmarkConfigurationError(MicrobenchmarkError):
    """Raised when a microbenchmark definition cannot be executed as configured."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(
            f"Input checking failed for microbenchmark '{name}' -- {reason}"
        )


class AllocationError(MicrobenchmarkError):
    """Raised when an allocator fails to produce trial input."""

    def __init__(self, name: str, index: int, cause: BaseException) -> None:
        self.name = name
        self.index = index
        self.cause = cause
        super().__init__(
            f"allocator for '{name}' failed at size index {index} -- "
            f"{type(cause).__name__}: {cause}"
        )


class KernelError(MicrobenchmarkError):
    """Raised when a timed kernel operation fails."""

    def __init__(self, name: str, index: int, cause: BaseException) -> None:
        self.name = name
        self.index = index
        self.cause = cause
        super().__init__(
            f"kernel for '{name}' failed at size index {index} -- "
            f"{type(cause).__name__}: {cause}"
        )


class DatasetLoadError(MicrobenchmarkError):
    """Raised when a named shared dataset cannot be found or read."""

    def __init__(self, dataset_name: str, reason: str) -> None:
        self.dataset_name = dataset_name
        self.reason = reason
        super().__init__(f"failed to read data object '{dataset_name}': {reason}")


class MicrobenchmarkSuiteError(MicrobenchmarkError):
    """Raised when a suite is structurally malformed before any trial runs."""

    pass


class SuiteConfigError(MicrobenchmarkSuiteError):
    """Raised when a suite file cannot be read or describes invalid definitions."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid suite file {path}: {reason}")
