"""Constants and default values for doclock.

This module centralizes defaults and environment variable names used
throughout the application.
"""

# ==================== LOCK DEFAULTS ====================

DEFAULT_DOC_TYPE: str = "lockdocument"  # Document kind when none is configured
DEFAULT_INDEX: str = "locks"
DEFAULT_SEARCH_SIZE: int = 10000  # Elasticsearch's default max result window

# ==================== STORE DEFAULTS ====================

DEFAULT_STORE: str = "elasticsearch"
SUPPORTED_STORES: tuple[str, ...] = ("elasticsearch", "memory")
DEFAULT_HOSTS: tuple[str, ...] = ("http://localhost:9200",)
DEFAULT_REQUEST_TIMEOUT: float = 10.0  # seconds
DEFAULT_STORE_MAX_RETRIES: int = 3  # Handled by the Elasticsearch transport

# Field holding the document kind inside an Elasticsearch lock document
KIND_FIELD: str = "kind"
# Separator between kind and resource in Elasticsearch document ids
DOC_ID_SEPARATOR: str = ":"

# ==================== LOGGING DEFAULTS ====================

LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB max per log file
LOG_FILE_BACKUP_COUNT: int = 5  # Number of backup log files to keep
VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_LOG_FORMATS: tuple[str, ...] = ("text", "json")

# ==================== ENVIRONMENT ====================

# Environment variable names mapped to config fields
ENV_VAR_MAPPING: dict[str, str] = {
    "store": "DOCLOCK_STORE",
    "hosts": "DOCLOCK_HOSTS",
    "api_key": "DOCLOCK_API_KEY",
    "username": "DOCLOCK_USERNAME",
    "password": "DOCLOCK_PASSWORD",
    "request_timeout": "DOCLOCK_REQUEST_TIMEOUT",
    "max_retries": "DOCLOCK_MAX_RETRIES",
    "retry_on_timeout": "DOCLOCK_RETRY_ON_TIMEOUT",
    "index": "DOCLOCK_INDEX",
    "doc_type": "DOCLOCK_DOC_TYPE",
    "owner_mode": "DOCLOCK_OWNER_MODE",
    "owner": "DOCLOCK_OWNER",
    "search_size": "DOCLOCK_SEARCH_SIZE",
    "log_level": "LOG_LEVEL",
    "log_format": "DOCLOCK_LOG_FORMAT",
    "log_file": "DOCLOCK_LOG_FILE",
}
