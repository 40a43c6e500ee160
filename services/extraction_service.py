# services/extraction_service.py
"""
Azure AI Document Intelligence wrapper for identity documents.

Submits the ID image to the prebuilt ID model, waits for the long-running
analysis and reads the report fields out of the first analyzed document.
"""

import asyncio
import logging
from io import BytesIO
from typing import Any, List, Optional

from azure.ai.documentintelligence.aio import DocumentIntelligenceClient
from azure.core.credentials import AzureKeyCredential

from config import settings
from models.schemas import IdData
from utils.exceptions import ExtractionException

logger = logging.getLogger(__name__)

# Report field -> Document Intelligence field names, first match wins
ID_FIELD_MAP = {
    "documentType": ["DocumentType"],
    "idNumber": ["DocumentNumber", "IdNumber"],
    "firstName": ["FirstName"],
    "lastName": ["LastName"],
    "expiryDate": ["DateOfExpiration"],
}


def _field_value(di_field) -> Optional[str]:
    """Convert a DocumentField to a plain string, preferring typed values."""
    if di_field is None:
        return None

    value_date = getattr(di_field, "value_date", None)
    if value_date is not None:
        return value_date.isoformat()

    for attr in ("value_string", "value_country_region", "value"):
        value = getattr(di_field, attr, None)
        if value:
            return str(value)

    return getattr(di_field, "content", None) or None


def extract_id_fields(document: Any) -> IdData:
    """Build IdData from an analyzed document. Missing fields keep their defaults."""
    fields = getattr(document, "fields", None) or {}
    values = {}

    for report_name, di_names in ID_FIELD_MAP.items():
        for di_name in di_names:
            value = _field_value(fields.get(di_name))
            if value:
                values[report_name] = value
                break

    if "documentType" not in values and getattr(document, "doc_type", None):
        values["documentType"] = document.doc_type

    return IdData(**values)


class ExtractionService:
    def __init__(
        self,
        client: DocumentIntelligenceClient,
        model_id: str = "prebuilt-idDocument",
        timeout: float = 120,
        polling_interval: int = 1,
    ):
        self.client = client
        self.model_id = model_id
        self.timeout = timeout
        self.polling_interval = polling_interval

    @classmethod
    def from_settings(cls) -> "ExtractionService":
        if not settings.FORM_RECOGNIZER_ENDPOINT or not settings.FORM_RECOGNIZER_KEY:
            raise RuntimeError("FORM_RECOGNIZER_ENDPOINT or FORM_RECOGNIZER_KEY is not set")

        client = DocumentIntelligenceClient(
            endpoint=settings.FORM_RECOGNIZER_ENDPOINT,
            credential=AzureKeyCredential(settings.FORM_RECOGNIZER_KEY),
            retry_total=settings.EXTRACTION_RETRY_TOTAL,
        )
        return cls(
            client,
            model_id=settings.ID_DOCUMENT_MODEL_ID,
            timeout=settings.EXTRACTION_TIMEOUT,
            polling_interval=settings.EXTRACTION_POLLING_INTERVAL,
        )

    async def _analyze(self, image_bytes: bytes) -> List[Any]:
        poller = await self.client.begin_analyze_document(
            self.model_id,
            body=BytesIO(image_bytes),
            content_type="application/octet-stream",
            polling_interval=self.polling_interval,
        )
        result = await poller.result()
        return list(getattr(result, "documents", None) or [])

    async def analyze_id_document(self, image_bytes: bytes) -> List[Any]:
        """Run the extraction job and return the analyzed documents (possibly empty)."""
        logger.info(f"Submitting ID image to {self.model_id} ({len(image_bytes)} bytes)")
        try:
            documents = await asyncio.wait_for(
                self._analyze(image_bytes),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise ExtractionException(
                f"Document extraction timed out after {self.timeout}s"
            ) from e

        logger.info(f"Document extraction finished: {len(documents)} document(s)")
        return documents

    async def close(self) -> None:
        await self.client.close()
