# main.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from routers import verify
from services.extraction_service import ExtractionService
from services.face_service import FaceService
from services.id_analyzer_service import IdAnalyzerService
from services.verification_service import VerificationService
from config import settings
import logging
from logging.handlers import RotatingFileHandler
import os

# Configure logging
log_dir = settings.LOG_DIR
os.makedirs(log_dir, exist_ok=True)

file_handler = RotatingFileHandler(
    f"{log_dir}/app.log",
    maxBytes=settings.LOG_MAX_BYTES,
    backupCount=settings.LOG_BACKUP_COUNT
)
console_handler = logging.StreamHandler()
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
file_handler.setFormatter(formatter)
console_handler.setFormatter(formatter)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    handlers=[file_handler, console_handler]
)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    app.state.verification_service = VerificationService(
        extraction=ExtractionService.from_settings(),
        face=FaceService.from_settings(),
        id_analyzer=IdAnalyzerService.from_settings(),
    )
    logger.info(f"Server running on http://localhost:{settings.PORT}")
    yield
    # Shutdown
    await app.state.verification_service.extraction.close()

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid verification request"},
    )

app.include_router(verify.router)

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.get("/")
async def root():
    return {
        "message": f"{settings.API_TITLE} v{settings.API_VERSION}",
        "endpoints": {
            "verify_id": "POST /verify-id",
            "health": "GET /health"
        }
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
