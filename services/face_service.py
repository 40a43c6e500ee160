# services/face_service.py
import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from config import settings
from utils.exceptions import FaceServiceException

logger = logging.getLogger(__name__)

class FaceService:
    """
    Azure Face API: one-shot detect and verify calls, no retry.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        api_version: str = "v1.0",
        detection_model: str = "detection_03",
        recognition_model: str = "recognition_04",
        timeout: int = 30,
    ):
        self.base_url = f"{endpoint.rstrip('/')}/face/{api_version}"
        self.api_key = api_key
        self.detection_model = detection_model
        self.recognition_model = recognition_model
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> Optional["FaceService"]:
        if not settings.FACE_API_ENDPOINT or not settings.FACE_API_KEY:
            logger.warning("FACE_API_ENDPOINT or FACE_API_KEY not set; face match disabled")
            return None
        return cls(
            settings.FACE_API_ENDPOINT,
            settings.FACE_API_KEY,
            api_version=settings.FACE_API_VERSION,
            detection_model=settings.FACE_DETECTION_MODEL,
            recognition_model=settings.FACE_RECOGNITION_MODEL,
            timeout=settings.REQUEST_TIMEOUT,
        )

    def _headers(self, content_type: str) -> Dict[str, str]:
        return {
            "Ocp-Apim-Subscription-Key": self.api_key,
            "Content-Type": content_type,
            "Accept": "application/json",
        }

    @staticmethod
    def _error_details(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    async def detect(self, image_bytes: bytes) -> Optional[str]:
        """Return the faceId of the first detected face, or None if there is none."""
        response = await asyncio.to_thread(
            requests.post,
            f"{self.base_url}/detect",
            params={
                "detectionModel": self.detection_model,
                "recognitionModel": self.recognition_model,
                "returnFaceId": "true",
            },
            headers=self._headers("application/octet-stream"),
            data=image_bytes,
            timeout=self.timeout,
        )

        if response.status_code != 200:
            logger.error(f"Face detection failed: {response.status_code} - {response.text}")
            raise FaceServiceException("Face detection failed", self._error_details(response))

        faces = response.json() or []
        logger.info(f"Face detection returned {len(faces)} face(s)")
        if not faces:
            return None
        return faces[0].get("faceId")

    async def verify(self, face_id1: str, face_id2: str) -> bool:
        response = await asyncio.to_thread(
            requests.post,
            f"{self.base_url}/verify",
            headers=self._headers("application/json"),
            json={"faceId1": face_id1, "faceId2": face_id2},
            timeout=self.timeout,
        )

        if response.status_code != 200:
            logger.error(f"Face verification failed: {response.status_code} - {response.text}")
            raise FaceServiceException("Face verification failed", self._error_details(response))

        data = response.json()
        logger.info(
            f"Face verification: isIdentical={data.get('isIdentical')} "
            f"confidence={data.get('confidence')}"
        )
        return bool(data.get("isIdentical"))
