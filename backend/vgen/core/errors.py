# vgen/core/errors.py
"""
Custom exceptions for the VGen Tools backend.

Route handlers turn these into the generic failure envelope; the specific
type is what ends up in the server log.
"""


class VGenError(Exception):
    """Base exception for all VGen errors."""
    pass


# =============================================================================
# AI service
# =============================================================================

class AIServiceError(VGenError):
    """Raised when the generative model API cannot be reached or rejects the call."""
    pass


class AIResponseError(AIServiceError):
    """Raised when the model output is not valid JSON or does not match the expected schema."""

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


# =============================================================================
# Storage
# =============================================================================

class StorageError(VGenError):
    """Raised when the storage backend fails a request."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


# =============================================================================
# File uploads
# =============================================================================

class FileProcessingError(VGenError):
    """Raised when an uploaded file cannot be turned into text."""
    pass


class UnsupportedFileTypeError(FileProcessingError):
    """Raised when an unsupported file type is uploaded."""

    def __init__(self, file_type: str, supported_types: list | None = None):
        self.file_type = file_type
        self.supported_types = supported_types or []
        msg = f"Unsupported file type: {file_type}"
        if supported_types:
            msg += f". Supported types: {', '.join(supported_types)}"
        super().__init__(msg)


class FileTooLargeError(FileProcessingError):
    """Raised when a file exceeds the maximum allowed size."""

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(f"File size ({size} bytes) exceeds maximum ({max_size} bytes)")
