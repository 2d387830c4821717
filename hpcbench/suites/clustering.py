"""Clustering microbenchmark suites.

Definitions are named ``<algorithm>_cluster_<features>_<clusters>_<vectors per
cluster>``. PAM needs memory quadratic in the number of feature vectors; CLARA
only clusters samples, so it takes the largest problems.
"""

from hpcbench.kernels.registry import KernelRegistry
from hpcbench.models.microbenchmark_models import ClusteringMicrobenchmark

# (algorithm, features, clusters, vectors per cluster)
DEFAULT_PROBLEMS = [
    ("pam", 3, 7, 2500),
    ("pam", 3, 7, 5000),
    ("pam", 3, 7, 5715),
    ("pam", 16, 33, 1213),
    ("pam", 64, 33, 1213),
    ("pam", 16, 7, 2858),
    ("pam", 32, 7, 2858),
    ("pam", 64, 7, 5715),
    ("clara", 64, 33, 1213),
    ("clara", 1000, 99, 1000),
]

EXAMPLE_PROBLEMS = [
    ("pam", 3, 3, 1000),
    ("clara", 3, 3, 1000),
]


def _clustering_microbenchmark(
    algorithm: str,
    features: int,
    clusters: int,
    per_cluster: int,
    number_of_trials: int,
    number_of_warmup_trials: int,
) -> ClusteringMicrobenchmark:
    spec = KernelRegistry.default().get("clustering", algorithm)
    return ClusteringMicrobenchmark(
        name=f"{algorithm}_cluster_{features}_{clusters}_{per_cluster}",
        description=(
            f"Clustering of {clusters * per_cluster} {features}-dimensional feature "
            f"vectors into {clusters} clusters using {spec.description}"
        ),
        number_of_features=[features],
        number_of_clusters=[clusters],
        number_of_feature_vectors_per_cluster=[per_cluster],
        number_of_trials=[number_of_trials],
        number_of_warmup_trials=[number_of_warmup_trials],
        allocator=spec.allocator,
        kernel_function=spec.kernel_function,
    )


def get_clustering_default_microbenchmarks() -> list[ClusteringMicrobenchmark]:
    """Default clustering microbenchmarks."""
    return [
        _clustering_microbenchmark(*problem, number_of_trials=3, number_of_warmup_trials=1)
        for problem in DEFAULT_PROBLEMS
    ]


def get_clustering_example_microbenchmarks() -> list[ClusteringMicrobenchmark]:
    """Small clustering microbenchmarks for trying out the harness."""
    return [
        _clustering_microbenchmark(*problem, number_of_trials=2, number_of_warmup_trials=1)
        for problem in EXAMPLE_PROBLEMS
    ]
