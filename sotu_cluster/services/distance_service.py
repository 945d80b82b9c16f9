# sotu_cluster/services/distance_service.py
"""
Pairwise cosine distances between document vectors.
"""
import numpy as np
import pandas as pd

from ..exceptions import EmptyVocabulary
from ..logging_config import get_logger
from ..utils.timing import timed

logger = get_logger('distance_service')

# Distance between a zero vector and any other document
ZERO_VECTOR_DISTANCE = 1.0


def check_vocabulary(matrix: pd.DataFrame) -> None:
    """
    Fail early on matrices that cannot separate documents.

    Raises:
        EmptyVocabulary: If there are no term columns or every row is zero
    """
    if matrix.shape[1] == 0:
        raise EmptyVocabulary("Document vectors have no terms")
    if not np.any(matrix.to_numpy(dtype=float)):
        raise EmptyVocabulary("Every document vector is zero")


def l2_normalize(matrix: pd.DataFrame) -> pd.DataFrame:
    """Scale each row to unit Euclidean length; zero rows stay zero."""
    values = matrix.to_numpy(dtype=float)
    norms = np.linalg.norm(values, axis=1, keepdims=True)
    scaled = np.divide(values, norms, out=np.zeros_like(values), where=norms > 0)
    return pd.DataFrame(scaled, index=matrix.index, columns=matrix.columns)


class DistanceService:
    """
    Computes cosine distance matrices.

    distance(i, j) = 1 - (v_i . v_j) / (|v_i| |v_j|)

    A document whose vector is all zeros (every term filtered out, or
    only terms with idf 0) has no direction. Its distance to every other
    document is defined as 1, the value for orthogonal vectors.
    """

    @timed("Cosine distance")
    def cosine_distance(self, matrix: pd.DataFrame) -> pd.DataFrame:
        """
        Build the symmetric document x document cosine distance matrix.

        Args:
            matrix: Document vectors, rows keyed by file name

        Returns:
            DataFrame with zero diagonal and entries in [0, 2]

        Raises:
            EmptyVocabulary: If the matrix carries no usable terms
        """
        check_vocabulary(matrix)

        values = matrix.to_numpy(dtype=float)
        norms = np.linalg.norm(values, axis=1)
        nonzero = norms > 0

        unit = np.zeros_like(values)
        unit[nonzero] = values[nonzero] / norms[nonzero, None]

        distance = 1.0 - unit @ unit.T
        distance = np.clip(distance, 0.0, 2.0)

        zero_rows = ~nonzero
        if zero_rows.any():
            zero_names = [str(n) for n, z in zip(matrix.index, zero_rows) if z]
            logger.warning(
                f"{len(zero_names)} zero vectors get distance "
                f"{ZERO_VECTOR_DISTANCE} to all documents: {zero_names}"
            )
            distance[zero_rows, :] = ZERO_VECTOR_DISTANCE
            distance[:, zero_rows] = ZERO_VECTOR_DISTANCE

        # Enforce exact symmetry and a zero diagonal after floating point noise
        distance = (distance + distance.T) / 2.0
        np.fill_diagonal(distance, 0.0)

        logger.info(f"Computed cosine distances for {len(matrix)} documents")
        return pd.DataFrame(distance, index=matrix.index.copy(), columns=matrix.index.copy())
