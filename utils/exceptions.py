# utils/exceptions.py
from typing import Any, Optional

from fastapi import HTTPException, status

class VerificationException(HTTPException):
    def __init__(self, detail: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)

class NoImageUploadedException(VerificationException):
    def __init__(self, detail: str = "No ID image uploaded"):
        super().__init__(detail=detail)

class DocumentRecognitionException(VerificationException):
    def __init__(self, detail: str = "ID document recognition failed"):
        super().__init__(detail=detail)


class CollaboratorException(Exception):
    """A remote service call failed. `details` holds the decoded error body, if any."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else message

class ExtractionException(CollaboratorException):
    pass

class FaceServiceException(CollaboratorException):
    pass

class IdAnalyzerException(CollaboratorException):
    pass
