"""Run-wide options: random number generation and the reported thread count.

The thread count is reporting-only. It is read through two environment
variables: ``HPCBENCH_NUM_THREADS_VARIABLE`` names the variable that actually
controls the numerical library (e.g. ``OMP_NUM_THREADS`` or
``MKL_NUM_THREADS``), and that variable holds the count.

Usage:
    from hpcbench.options import BenchmarkOptions, get_number_of_threads

    options = BenchmarkOptions.from_env()
    rng = options.make_rng()
    threads = get_number_of_threads()
"""

from typing import Literal

import numpy as np
from pydantic import BaseModel, Field, ValidationError

from hpcbench.utils.env import EnvVarError, EnvVarNotSetError, get_env, require_env

NUM_THREADS_VARIABLE = "HPCBENCH_NUM_THREADS_VARIABLE"

OPTION_VARIABLES = {
    "rng_seed": "HPCBENCH_RNG_SEED",
    "rng_kind": "HPCBENCH_RNG_KIND",
    "warnings_as_errors": "HPCBENCH_WARNINGS_AS_ERRORS",
}

RngKind = Literal["PCG64", "MT19937", "Philox", "SFC64"]


class ThreadCountConfigurationError(EnvVarNotSetError):
    """Raised when the thread count cannot be resolved from the environment."""

    def __init__(self, name: str, indirect_from: str | None = None) -> None:
        super().__init__(name)
        self.indirect_from = indirect_from
        if indirect_from is not None:
            self.args = (
                f"Environment variable {name} (named by {indirect_from}) is not set; "
                "it must hold the number of threads the kernels run with",
            )


class BenchmarkOptionsError(EnvVarError):
    """Raised when an HPCBENCH_* option variable holds an invalid value."""

    def __init__(self, name: str, value: object, reason: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid value {name}='{value}': {reason}")


class BenchmarkOptions(BaseModel):
    """Options that apply to every trial of a benchmark run."""

    rng_seed: int = Field(42, ge=0, description="Seed used before every allocation")
    rng_kind: RngKind = Field(
        "PCG64", description="numpy bit generator used for allocator randomness"
    )
    warnings_as_errors: bool = Field(
        True,
        description="Treat warnings raised by allocators or kernels as failures",
    )

    @classmethod
    def from_env(cls) -> "BenchmarkOptions":
        """Build options from HPCBENCH_* environment variables, falling back to defaults.

        Raises:
            EnvVarTypeError: If a variable cannot be converted to its type.
            BenchmarkOptionsError: If a variable holds a value outside its range
                or choices.
        """
        defaults = cls()
        values = {
            "rng_seed": get_env(
                OPTION_VARIABLES["rng_seed"], default=defaults.rng_seed, as_type=int
            ),
            "rng_kind": get_env(OPTION_VARIABLES["rng_kind"], default=defaults.rng_kind),
            "warnings_as_errors": get_env(
                OPTION_VARIABLES["warnings_as_errors"],
                default=defaults.warnings_as_errors,
                as_type=bool,
            ),
        }
        try:
            return cls(**values)
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0])
            raise BenchmarkOptionsError(
                OPTION_VARIABLES[field], values[field], error["msg"]
            ) from e

    def make_rng(self) -> np.random.Generator:
        """Return a generator in the fixed, reproducible starting state."""
        bit_generator = getattr(np.random, self.rng_kind)(self.rng_seed)
        return np.random.Generator(bit_generator)


def get_number_of_threads() -> int:
    """Resolve the reported thread count from the environment.

    Returns:
        Value of the variable named by HPCBENCH_NUM_THREADS_VARIABLE.

    Raises:
        ThreadCountConfigurationError: If either variable is unset.
        EnvVarTypeError: If the thread count is not an integer.
    """
    try:
        variable = str(require_env(NUM_THREADS_VARIABLE, log=True)).strip()
    except EnvVarNotSetError as e:
        raise ThreadCountConfigurationError(NUM_THREADS_VARIABLE) from e

    try:
        threads = int(require_env(variable, as_type=int, log=True))
    except EnvVarNotSetError as e:
        raise ThreadCountConfigurationError(variable, NUM_THREADS_VARIABLE) from e

    return threads
