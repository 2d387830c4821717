"""Clustering kernels.

PAM and CLARA (partitioning around medoids and its sampling approximation)
come from scikit-learn-extra; k-means and Ward hierarchical clustering from
scipy.cluster. scikit-learn-extra is imported when a medoid kernel first
runs, so the other kernels work without it.
"""

from typing import Any

import numpy as np
from scipy.cluster.hierarchy import fcluster, linkage
from scipy.cluster.vq import kmeans2

from hpcbench.models.microbenchmark_models import ClusteringMicrobenchmark
from hpcbench.timing import TrialTimings, time_call

# Spread of the cluster centres relative to the unit variance of each cluster
CENTER_SCALE = 10.0

# CLARA draws this many samples of 40 + 2k vectors each
CLARA_SAMPLES = 5


def clustering_allocator(
    microbenchmark: ClusteringMicrobenchmark,
    index: int,
    rng: np.random.Generator,
    dataset: Any = None,
) -> dict[str, Any]:
    """Generate Gaussian clusters around uniformly drawn centres.

    Returns:
        Dict with the feature vectors ``X`` (one per row), the number of
        clusters ``k`` the kernel should look for and a ``seed`` for any
        randomized initialization.
    """
    features = int(microbenchmark.number_of_features[index])
    clusters = int(microbenchmark.number_of_clusters[index])
    per_cluster = int(microbenchmark.number_of_feature_vectors_per_cluster[index])

    if clusters < 1 or features < 1:
        raise ValueError("number_of_clusters and number_of_features must be >= 1")

    if dataset is not None:
        x = np.asarray(dataset, dtype=np.float64)
    else:
        centers = rng.uniform(-CENTER_SCALE, CENTER_SCALE, size=(clusters, features))
        x = np.repeat(centers, per_cluster, axis=0)
        x += rng.standard_normal(x.shape)

    return {"X": x, "k": clusters, "seed": int(rng.integers(0, 2**31 - 1))}


def _fit_labels(estimator: Any, x: np.ndarray) -> np.ndarray:
    return estimator.fit(x).labels_


def pam_kernel(
    microbenchmark: ClusteringMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time partitioning around medoids with BUILD initialization.

    PAM works on the full pairwise distance matrix, so memory grows with the
    square of the number of feature vectors.
    """
    from sklearn_extra.cluster import KMedoids

    estimator = KMedoids(
        n_clusters=kernel_parameters["k"],
        metric="euclidean",
        method="pam",
        init="build",
        random_state=kernel_parameters["seed"],
    )
    return time_call(_fit_labels, estimator, kernel_parameters["X"])


def clara_kernel(
    microbenchmark: ClusteringMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time CLARA, which runs PAM on random samples and keeps the best medoids."""
    from sklearn_extra.cluster import CLARA

    k = kernel_parameters["k"]
    estimator = CLARA(
        n_clusters=k,
        n_sampling=min(40 + 2 * k, len(kernel_parameters["X"])),
        n_sampling_iter=CLARA_SAMPLES,
        metric="euclidean",
        random_state=kernel_parameters["seed"],
    )
    return time_call(_fit_labels, estimator, kernel_parameters["X"])


def kmeans_kernel(
    microbenchmark: ClusteringMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time k-means clustering with k-means++ initialization."""
    return time_call(
        kmeans2,
        kernel_parameters["X"],
        kernel_parameters["k"],
        minit="++",
        seed=kernel_parameters["seed"],
    )


def _ward_clusters(x: np.ndarray, k: int) -> np.ndarray:
    return fcluster(linkage(x, method="ward"), t=k, criterion="maxclust")


def hierarchical_kernel(
    microbenchmark: ClusteringMicrobenchmark, kernel_parameters: dict[str, Any]
) -> TrialTimings:
    """Time Ward agglomerative clustering cut into ``k`` clusters.

    Memory grows with the square of the number of feature vectors.
    """
    return time_call(_ward_clusters, kernel_parameters["X"], kernel_parameters["k"])
