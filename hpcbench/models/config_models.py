"""Schema of suite files: microbenchmark definitions written as YAML or JSON.

A suite file holds definitions of one kind. Each entry names a built-in kernel,
which supplies the allocator and kernel function, or gives both as import
paths ("package.module:attribute"). All other keys are fields of the
definition model for that kind.

Example (YAML):
    kind: dense
    microbenchmarks:
      - name: cholesky_small
        kernel: cholesky
        matrix_dimension: [500, 1000]
        number_of_trials: [3, 3]
        number_of_warmup_trials: [1, 1]
      - name: custom
        allocator: mypackage.kernels:allocate
        kernel_function: mypackage.kernels:run
        matrix_dimension: 256
        number_of_trials: 5
        number_of_warmup_trials: 1
"""

import json
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped, unused-ignore]
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hpcbench.errors import SuiteConfigError
from hpcbench.kernels.registry import KernelNotFoundError, KernelRegistry
from hpcbench.models.microbenchmark_models import (
    MICROBENCHMARK_MODELS,
    Microbenchmark,
    MicrobenchmarkKind,
)


class MicrobenchmarkEntry(BaseModel):
    """One definition in a suite file."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, description="Microbenchmark name")
    kernel: str | None = Field(
        None, description="Built-in kernel name (see `hpcbench kernels`)"
    )

    def definition_fields(self) -> dict[str, Any]:
        """Fields passed through to the definition model."""
        return {"name": self.name, **(self.model_extra or {})}


class SuiteConfig(BaseModel):
    """Root of a suite file."""

    kind: MicrobenchmarkKind = Field(..., description="dense, sparse or clustering")
    microbenchmarks: list[MicrobenchmarkEntry] = Field(
        default_factory=list, description="Definitions in execution order"
    )

    def to_microbenchmarks(
        self, registry: KernelRegistry | None = None, source: str = "<suite>"
    ) -> list[Microbenchmark]:
        """Build the definition models, resolving kernel names.

        Raises:
            SuiteConfigError: On an unknown kernel or an invalid definition.
        """
        registry = registry or KernelRegistry.default()
        model_cls = MICROBENCHMARK_MODELS[self.kind]
        microbenchmarks: list[Microbenchmark] = []

        for entry in self.microbenchmarks:
            fields = entry.definition_fields()
            if entry.kernel is not None:
                try:
                    spec = registry.get(self.kind, entry.kernel)
                except KernelNotFoundError as e:
                    raise SuiteConfigError(source, f"{entry.name}: {e}") from e
                fields.setdefault("description", spec.description)
                fields["allocator"] = spec.allocator
                fields["kernel_function"] = spec.kernel_function

            try:
                microbenchmarks.append(model_cls.model_validate(fields))
            except ValidationError as e:
                raise SuiteConfigError(source, f"{entry.name}: {e}") from e

        return microbenchmarks


def load_suite_config(config_path: str | Path) -> SuiteConfig:
    """Read and validate a YAML (.yaml/.yml) or JSON suite file.

    Raises:
        SuiteConfigError: If the file is missing, unparsable or invalid.
    """
    path = Path(config_path)
    if not path.exists():
        raise SuiteConfigError(str(path), "file not found")

    try:
        content = path.read_text()
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise SuiteConfigError(str(path), f"failed to parse: {e}") from e

    if not isinstance(data, dict):
        raise SuiteConfigError(str(path), "must be a dictionary")

    try:
        return SuiteConfig.model_validate(data)
    except ValidationError as e:
        raise SuiteConfigError(str(path), str(e)) from e


def load_suite(
    config_path: str | Path, registry: KernelRegistry | None = None
) -> tuple[str, list[Microbenchmark]]:
    """Load a suite file into its kind and ordered definitions.

    Raises:
        SuiteConfigError: If the file or any definition is invalid.
    """
    config = load_suite_config(config_path)
    return config.kind, config.to_microbenchmarks(registry, source=str(config_path))
