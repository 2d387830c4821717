"""Loading of named shared datasets.

A dataset named ``NAME`` is the Matrix Market file ``NAME.mtx``. The bundled
``hpcbench/data`` directory is searched first, then ``./data`` relative to the
working directory. Datasets are loaded once per microbenchmark by the suite and
handed to the allocator; nothing is kept once the microbenchmark finishes.
"""

from importlib import resources
from pathlib import Path

import scipy.io
import scipy.sparse as sp

from hpcbench.errors import DatasetLoadError

DATASET_EXTENSION = ".mtx"
LOCAL_DATA_DIRECTORY = "data"


def dataset_search_paths(name: str) -> list[Path]:
    """Candidate files for dataset ``name``, in search order."""
    file_name = f"{name}{DATASET_EXTENSION}"
    bundled = Path(str(resources.files("hpcbench.data"))) / file_name
    local = Path.cwd() / LOCAL_DATA_DIRECTORY / file_name
    return [bundled, local]


def find_dataset(name: str) -> Path:
    """Locate the file of dataset ``name``.

    Raises:
        DatasetLoadError: If no candidate file exists.
    """
    candidates = dataset_search_paths(name)
    for path in candidates:
        if path.is_file():
            return path
    searched = ", ".join(str(p) for p in candidates)
    raise DatasetLoadError(name, f"not found (searched {searched})")


def load_dataset(name: str) -> sp.csc_matrix:
    """Read dataset ``name`` as a CSC sparse matrix.

    Raises:
        DatasetLoadError: If the file is missing or cannot be parsed.
    """
    path = find_dataset(name)
    try:
        data = scipy.io.mmread(path)
    except Exception as e:
        raise DatasetLoadError(name, f"cannot read {path}: {e}") from e
    return sp.csc_matrix(data)
