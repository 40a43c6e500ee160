from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from main import app
from routers.verify import get_verification_service
from services.verification_service import VerificationService

ID_IMAGE = b"id-image-bytes"
SELFIE = b"selfie-bytes"


def make_field(**attrs):
    return SimpleNamespace(**attrs)


def make_document(fields=None, doc_type="idDocument.driverLicense"):
    return SimpleNamespace(doc_type=doc_type, fields=fields or {})


def full_document():
    return make_document(
        {
            "DocumentType": make_field(value_string="Driver License"),
            "DocumentNumber": make_field(value_string="D1234567"),
            "FirstName": make_field(value_string="Jane"),
            "LastName": make_field(value_string="Doe"),
            "DateOfExpiration": make_field(value_date=date(2030, 5, 17)),
        }
    )


class FakeExtraction:
    def __init__(self, documents=None, error=None):
        self.documents = documents if documents is not None else [full_document()]
        self.error = error
        self.calls = []

    async def analyze_id_document(self, image_bytes):
        self.calls.append(image_bytes)
        if self.error:
            raise self.error
        return self.documents


class FakeFace:
    def __init__(self, face_ids=None, identical=True, detect_error=None):
        # image bytes -> faceId (missing key means no face)
        self.face_ids = face_ids if face_ids is not None else {SELFIE: "face-selfie", ID_IMAGE: "face-id"}
        self.identical = identical
        self.detect_error = detect_error
        self.detect_calls = []
        self.verify_calls = []

    async def detect(self, image_bytes):
        self.detect_calls.append(image_bytes)
        if self.detect_error:
            raise self.detect_error
        return self.face_ids.get(image_bytes)

    async def verify(self, face_id1, face_id2):
        self.verify_calls.append((face_id1, face_id2))
        return self.identical


class FakeIdAnalyzer:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else {"decision": "accept"}
        self.error = error
        self.calls = []

    async def scan(self, image_bytes):
        self.calls.append(image_bytes)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def make_client():
    def _make(extraction=None, face=None, id_analyzer=None):
        service = VerificationService(
            extraction=extraction or FakeExtraction(),
            face=face,
            id_analyzer=id_analyzer,
        )
        app.dependency_overrides[get_verification_service] = lambda: service
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
