"""Shape validation for embedding API responses.

A malformed response must never turn into a default or zero vector: a
silent zero vector would rank arbitrarily against every query.  Anything
that is not a non-empty list of finite numbers per input is rejected.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any

from syncbrain.utils.errors import EmbeddingError


def validate_vectors(raw: Any, expected_count: int, provider_name: str) -> list[list[float]]:
    """Return *raw* as ``list[list[float]]`` or raise :class:`EmbeddingError`."""
    if not isinstance(raw, (list, tuple)) or len(raw) != expected_count:
        raise EmbeddingError(
            message=(
                f"Unexpected embedding response: expected {expected_count} vectors, "
                f"got {type(raw).__name__}"
            ),
            provider_name=provider_name,
        )

    vectors: list[list[float]] = []
    for position, vector in enumerate(raw):
        if not isinstance(vector, (list, tuple)) or not vector:
            raise EmbeddingError(
                message=f"Unexpected embedding format at position {position}",
                provider_name=provider_name,
            )
        if not all(
            isinstance(v, Real) and not isinstance(v, bool) and math.isfinite(v)
            for v in vector
        ):
            raise EmbeddingError(
                message=f"Non-numeric embedding values at position {position}",
                provider_name=provider_name,
            )
        if not any(vector):
            raise EmbeddingError(
                message=f"Zero embedding vector at position {position}",
                provider_name=provider_name,
            )
        vectors.append([float(v) for v in vector])
    return vectors
