from __future__ import annotations

import base64
import binascii
import logging

import cv2
import face_recognition
import numpy as np

from ..core.exceptions import BiometricError

logger = logging.getLogger(__name__)


class FaceEncoder:
    """Turn a camera snapshot (base64 data URL) into a 128-d face descriptor."""

    def decode_image(self, data_url: str) -> np.ndarray:
        if not data_url:
            raise BiometricError("Missing image")
        payload = data_url.split(",", 1)[1] if "," in data_url else data_url
        try:
            raw = base64.b64decode(payload)
        except (binascii.Error, ValueError):
            raise BiometricError("Image is not valid base64")

        img = cv2.imdecode(np.frombuffer(raw, np.uint8), cv2.IMREAD_UNCHANGED)
        if img is None:
            raise BiometricError("Could not decode image")
        if len(img.shape) == 3 and img.shape[2] == 4:
            img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
        elif len(img.shape) == 2:
            img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

        rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        return np.ascontiguousarray(rgb, dtype=np.uint8)

    def encode(self, data_url: str) -> list[float]:
        rgb = self.decode_image(data_url)
        boxes = face_recognition.face_locations(rgb)
        if not boxes:
            raise BiometricError("No face detected")
        if len(boxes) > 1:
            logger.info("Multiple faces detected (%s), using the first one", len(boxes))

        encodings = face_recognition.face_encodings(rgb, boxes[:1])
        if not encodings:
            raise BiometricError("Could not compute face descriptor")
        return [float(x) for x in encodings[0]]
