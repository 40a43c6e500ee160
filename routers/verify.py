# routers/verify.py
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response
from typing import Optional
from models.schemas import ErrorResponse, VerificationReport
from services.verification_service import VerificationService, build_environment
from utils.exceptions import NoImageUploadedException, VerificationException
from config import settings
import json
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["ID Verification"])


def get_verification_service(request: Request) -> VerificationService:
    """Collaborator clients are built once in the app lifespan."""
    return request.app.state.verification_service


@router.post(
    "/verify-id",
    responses={
        200: {"model": VerificationReport},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def verify_id(
    idImage: Optional[UploadFile] = File(None),
    enableFaceMatch: Optional[str] = Form(None),
    faceImage: Optional[str] = Form(None),
    ip: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    vpnDetected: Optional[str] = Form(None),
    audioSource: Optional[str] = Form(None),
    service: VerificationService = Depends(get_verification_service),
):
    """
    Verify an uploaded ID image, optionally matching it against a selfie.
    Returns the verification report as JSON.
    """
    try:
        if idImage is None:
            raise NoImageUploadedException()

        id_image = await idImage.read()
        if not id_image:
            raise NoImageUploadedException()

        logger.info(
            f"Verification request: {idImage.filename} ({idImage.content_type}, "
            f"{len(id_image)} bytes), face match: {enableFaceMatch}"
        )

        report = await service.verify_id(
            id_image,
            enable_face_match=enableFaceMatch == "true",
            face_image_base64=faceImage,
            environment=build_environment(ip, location, vpnDetected, audioSource),
        )

        headers = {}
        if settings.REPORT_AS_ATTACHMENT:
            headers["Content-Disposition"] = 'attachment; filename="verification-report.json"'

        logger.info(f"Verification finished: {report.status.value} for '{report.candidate}'")
        return Response(
            content=json.dumps(report.model_dump(mode="json"), indent=2),
            media_type="application/json",
            headers=headers,
        )
    except VerificationException:
        raise
    except Exception as e:
        logger.error(f"General verification error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "details": str(e)},
        )
