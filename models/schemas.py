# models/schemas.py
from pydantic import BaseModel
from typing import Optional, Dict, Any
from enum import Enum

class VerificationStatus(str, Enum):
    VERIFIED = "VERIFIED"
    FAILED = "FAILED"

class FaceMatchVerdict(str, Enum):
    MATCH = "MATCH"
    NO_MATCH = "NO_MATCH"
    NO_FACE_DETECTED = "NO_FACE_DETECTED"

class IdData(BaseModel):
    documentType: str = "Unknown"
    idNumber: str = ""
    firstName: str = ""
    lastName: str = ""
    expiryDate: str = ""

class EnvironmentData(BaseModel):
    ip: str = "Unknown"
    location: str = "Unknown"
    vpnDetected: bool = False
    audioSource: str = "Unknown"

class CollaboratorError(BaseModel):
    error: str
    details: Any = None

class VerificationReport(BaseModel):
    timestamp: str
    candidate: str
    idData: IdData
    faceMatch: Optional[FaceMatchVerdict] = None
    faceMatchError: Optional[CollaboratorError] = None
    environment: EnvironmentData
    # Raw ID Analyzer response, or {error, details} when the call failed
    idAnalyzer: Optional[Dict[str, Any]] = None
    status: VerificationStatus

class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
