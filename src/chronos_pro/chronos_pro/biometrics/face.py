"""Face descriptor normalization and Euclidean matching.

Descriptors are 128-d vectors (face_recognition / dlib). Matching is a plain
Euclidean distance against stored vectors:

- ``verify_face`` is the strict 1:1 check (threshold 0.45).
- ``FaceMatcher.identify`` is the 1:N search used by the kiosk (threshold 0.6).
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

import numpy as np

from ..core.constants import (
    FACE_DESCRIPTOR_LENGTH,
    FACE_MATCH_THRESHOLD,
    FACE_NEAR_MISS_DISTANCE,
    FACE_SEARCH_THRESHOLD,
)
from ..core.exceptions import ValidationError
from ..employees.model import Profile

logger = logging.getLogger(__name__)


def normalize_descriptor(value: Any) -> list[float]:
    """Accept a list/array, a JSON string '[..]' or a pgvector string '{..}'."""
    if value is None:
        return []
    if isinstance(value, np.ndarray):
        return [float(x) for x in value.ravel()]
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            return [float(x) for x in json.loads(text)]
        text = text.strip("{}")
        return [float(x) for x in text.split(",") if x.strip()]
    if isinstance(value, (list, tuple)):
        return [float(x) for x in value]
    raise TypeError(f"Unsupported descriptor type: {type(value)!r}")


def validate_descriptor(value: Any) -> list[float]:
    try:
        vector = normalize_descriptor(value)
    except (TypeError, ValueError):
        raise ValidationError("Face descriptor is not a numeric vector")
    if len(vector) != FACE_DESCRIPTOR_LENGTH:
        raise ValidationError(f"Face descriptor must have {FACE_DESCRIPTOR_LENGTH} values (got {len(vector)})")
    if not all(math.isfinite(x) for x in vector):
        raise ValidationError("Face descriptor contains invalid values")
    return vector


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


def verify_face(current: Any, saved: Any, *, threshold: float = FACE_MATCH_THRESHOLD) -> bool:
    try:
        current_v = normalize_descriptor(current)
        saved_v = normalize_descriptor(saved)
    except (TypeError, ValueError):
        logger.error("Unreadable face descriptor")
        return False

    if not saved_v or len(current_v) != len(saved_v):
        logger.error("Descriptor dimension mismatch (%s vs %s)", len(current_v), len(saved_v))
        return False

    distance = euclidean_distance(current_v, saved_v)
    logger.info("[audit] face match attempt distance=%.4f", distance)

    is_match = distance < threshold
    if not is_match and distance < FACE_NEAR_MISS_DISTANCE:
        logger.warning("[security] near-threshold face match attempt distance=%.4f", distance)
    return is_match


@dataclass(frozen=True)
class FaceMatch:
    profile: Profile
    distance: float


class FaceMatcher:
    """1:N identification over enrolled profiles."""

    def __init__(self, *, threshold: float = FACE_SEARCH_THRESHOLD):
        self._threshold = float(threshold)

    def identify(self, descriptor: Any, candidates: Iterable[Profile]) -> Optional[FaceMatch]:
        query = np.asarray(validate_descriptor(descriptor), dtype=float)

        enrolled = [p for p in candidates if p.face_embedding and len(p.face_embedding) == len(query)]
        if not enrolled:
            logger.warning("No enrolled faces to compare against")
            return None

        known = np.asarray([p.face_embedding for p in enrolled], dtype=float)
        distances = np.linalg.norm(known - query, axis=1)
        best = int(np.argmin(distances))
        best_distance = float(distances[best])

        if best_distance >= self._threshold:
            logger.info("No match within threshold (closest=%.4f)", best_distance)
            return None

        logger.info("[audit] identified employee %s distance=%.4f", enrolled[best].user_id, best_distance)
        return FaceMatch(profile=enrolled[best], distance=best_distance)
