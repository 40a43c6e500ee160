# services/id_analyzer_service.py
import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from config import settings
from utils.encoding import encode_base64_image
from utils.exceptions import IdAnalyzerException

logger = logging.getLogger(__name__)

class IdAnalyzerService:
    """
    ID Analyzer document scan. Returns the raw JSON decision object.
    """

    def __init__(self, url: str, api_key: str, profile: str = "", timeout: int = 30):
        self.url = url
        self.api_key = api_key
        self.profile = profile
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> Optional["IdAnalyzerService"]:
        if not settings.ID_ANALYZER_API_KEY:
            logger.info("ID_ANALYZER_API_KEY not set; ID Analyzer integration disabled")
            return None
        return cls(
            settings.ID_ANALYZER_URL,
            settings.ID_ANALYZER_API_KEY,
            profile=settings.ID_ANALYZER_PROFILE,
            timeout=settings.REQUEST_TIMEOUT,
        )

    async def scan(self, image_bytes: bytes) -> Dict[str, Any]:
        payload = {"document": encode_base64_image(image_bytes)}
        if self.profile:
            payload["profile"] = self.profile

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-API-KEY": self.api_key,
        }

        logger.info(f"Using ID Analyzer key: {self.api_key[:5]}...")
        logger.info(f"Sending document to ID Analyzer at: {self.url}")

        response = await asyncio.to_thread(
            requests.post,
            self.url,
            json=payload,
            headers=headers,
            timeout=self.timeout,
        )

        if not response.ok:
            try:
                details = response.json()
            except ValueError:
                details = response.text
            logger.error(f"ID Analyzer error: Status {response.status_code} - {details}")
            raise IdAnalyzerException(
                f"ID Analyzer API Error: Status {response.status_code}", details
            )

        data = response.json()
        logger.info(f"ID Analyzer decision: {data.get('decision', 'n/a')}")
        logger.debug(f"ID Analyzer response: {data}")
        return data
