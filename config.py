from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # API Configuration
    API_TITLE: str = "ID Verification API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 5001

    # Azure Document Intelligence (Form Recognizer)
    FORM_RECOGNIZER_ENDPOINT: str = ""
    FORM_RECOGNIZER_KEY: str = ""
    ID_DOCUMENT_MODEL_ID: str = "prebuilt-idDocument"
    EXTRACTION_TIMEOUT: int = 120
    EXTRACTION_RETRY_TOTAL: int = 3
    EXTRACTION_POLLING_INTERVAL: int = 1

    # Azure Face API
    FACE_API_ENDPOINT: str = ""
    FACE_API_KEY: str = ""
    FACE_API_VERSION: str = "v1.0"
    FACE_DETECTION_MODEL: str = "detection_03"
    FACE_RECOGNITION_MODEL: str = "recognition_04"

    # ID Analyzer
    ID_ANALYZER_URL: str = "https://api2.idanalyzer.com/scan"
    ID_ANALYZER_API_KEY: str = ""
    ID_ANALYZER_PROFILE: str = ""

    # Verification Settings
    REQUEST_TIMEOUT: int = 30
    REPORT_AS_ATTACHMENT: bool = False

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    LOG_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
