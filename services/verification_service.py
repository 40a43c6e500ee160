# services/verification_service.py
"""
Verification orchestrator.

Runs document extraction, the optional ID Analyzer scan and the optional
face match for one uploaded ID image, then assembles the verification report.
Extraction is mandatory and its failures propagate; the optional
collaborators degrade into an error object inside the report.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from models.schemas import (
    CollaboratorError,
    EnvironmentData,
    FaceMatchVerdict,
    IdData,
    VerificationReport,
    VerificationStatus,
)
from services.extraction_service import ExtractionService, extract_id_fields
from services.face_service import FaceService
from services.id_analyzer_service import IdAnalyzerService
from utils.encoding import decode_base64_image
from utils.exceptions import CollaboratorException, DocumentRecognitionException

logger = logging.getLogger(__name__)


def _error_details(error: Exception) -> Any:
    if isinstance(error, CollaboratorException):
        return error.details
    return str(error)


def decide_status(id_data: IdData, id_analyzer_result: Optional[Dict[str, Any]]) -> VerificationStatus:
    """
    VERIFIED needs an extracted ID number. A third-party decision other than
    "accept" vetoes it; an absent decision (integration disabled or failed)
    does not.
    """
    if not id_data.idNumber:
        return VerificationStatus.FAILED

    decision = (id_analyzer_result or {}).get("decision")
    if decision is None or decision == "accept":
        return VerificationStatus.VERIFIED
    return VerificationStatus.FAILED


def build_environment(
    ip: Optional[str] = None,
    location: Optional[str] = None,
    vpn_detected: Optional[str] = None,
    audio_source: Optional[str] = None,
) -> EnvironmentData:
    return EnvironmentData(
        ip=ip or "Unknown",
        location=location or "Unknown",
        vpnDetected=vpn_detected == "true",
        audioSource=audio_source or "Unknown",
    )


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class VerificationService:
    """
    Holds the collaborator clients built at startup; stateless per request.
    """

    def __init__(
        self,
        extraction: ExtractionService,
        face: Optional[FaceService] = None,
        id_analyzer: Optional[IdAnalyzerService] = None,
    ):
        self.extraction = extraction
        self.face = face
        self.id_analyzer = id_analyzer

    async def extract_id_data(self, id_image: bytes) -> IdData:
        documents = await self.extraction.analyze_id_document(id_image)
        if not documents:
            raise DocumentRecognitionException()

        id_data = extract_id_fields(documents[0])
        logger.info(f"Extracted ID fields: {id_data.model_dump()}")
        return id_data

    async def run_id_analyzer(self, id_image: bytes) -> Optional[Dict[str, Any]]:
        if self.id_analyzer is None:
            return None
        try:
            return await self.id_analyzer.scan(id_image)
        except Exception as e:
            logger.error(f"Error calling ID Analyzer: {_error_details(e)}")
            return CollaboratorError(
                error="ID Analyzer request failed",
                details=_error_details(e),
            ).model_dump()

    async def match_faces(self, id_image: bytes, face_image_base64: str) -> FaceMatchVerdict:
        if self.face is None:
            raise RuntimeError("Face API is not configured")

        selfie = decode_base64_image(face_image_base64)
        selfie_face_id, id_face_id = await asyncio.gather(
            self.face.detect(selfie),
            self.face.detect(id_image),
        )
        if not selfie_face_id or not id_face_id:
            return FaceMatchVerdict.NO_FACE_DETECTED

        is_identical = await self.face.verify(selfie_face_id, id_face_id)
        return FaceMatchVerdict.MATCH if is_identical else FaceMatchVerdict.NO_MATCH

    async def run_face_match(
        self, id_image: bytes, face_image_base64: str
    ) -> Tuple[Optional[FaceMatchVerdict], Optional[CollaboratorError]]:
        try:
            verdict = await self.match_faces(id_image, face_image_base64)
            logger.info(f"Face match verdict: {verdict.value}")
            return verdict, None
        except Exception as e:
            logger.error(f"Face match error: {_error_details(e)}", exc_info=True)
            return None, CollaboratorError(
                error="Face match request failed",
                details=_error_details(e),
            )

    async def verify_id(
        self,
        id_image: bytes,
        enable_face_match: bool = False,
        face_image_base64: Optional[str] = None,
        environment: Optional[EnvironmentData] = None,
    ) -> VerificationReport:
        """Run every verification step for one ID image and build the report."""
        id_data = await self.extract_id_data(id_image)
        id_analyzer_result = await self.run_id_analyzer(id_image)

        face_match = None
        face_match_error = None
        if enable_face_match and face_image_base64:
            face_match, face_match_error = await self.run_face_match(id_image, face_image_base64)

        return VerificationReport(
            timestamp=utc_timestamp(),
            candidate=" ".join(n for n in (id_data.firstName, id_data.lastName) if n),
            idData=id_data,
            faceMatch=face_match,
            faceMatchError=face_match_error,
            environment=environment or EnvironmentData(),
            idAnalyzer=id_analyzer_result,
            status=decide_status(id_data, id_analyzer_result),
        )
