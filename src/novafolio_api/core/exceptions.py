"""Domain exceptions for the NovaFolio API.

Each exception carries the machine-readable ``code`` and the HTTP status the
API layer reports for it (see ``api/errors.py``).
"""

from typing import Any, Dict, List, Optional


class NovaFolioError(Exception):
    """Base class for errors reported to API callers."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        if code is not None:
            self.code = code
        super().__init__(message or self.code)

    def payload(self) -> Dict[str, Any]:
        return {"error": self.code}


class NotFoundError(NovaFolioError):
    """Raised when a record is absent or outside the tenant scope."""

    status_code = 404
    code = "not_found"


class ClientNotFound(NotFoundError):
    code = "client_not_found"

    def __init__(self, client_id: str, code: Optional[str] = None):
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found", code)


class CaseNotFound(NotFoundError):
    code = "case_not_found"

    def __init__(self, case_id: str, code: Optional[str] = None):
        self.case_id = case_id
        super().__init__(f"Case {case_id} not found", code)


class DocumentNotFound(NotFoundError):
    code = "not_found"

    def __init__(self, document_id: str, code: Optional[str] = None):
        self.document_id = document_id
        super().__init__(f"Document {document_id} not found", code)


class JobNotFound(NotFoundError):
    code = "not_found"

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class UnsupportedMediaType(NovaFolioError):
    """Raised when a MIME type is outside the PDF/DOCX allow-list."""

    status_code = 415
    code = "unsupported_media_type"

    def __init__(self, mime: Optional[str]):
        self.mime = mime
        super().__init__(f"Unsupported media type: {mime}")


class ValidationFailed(NovaFolioError):
    """Raised for request input rejected after schema validation."""

    status_code = 400
    code = "validation_error"

    def __init__(self, field: Optional[str], message: str, code: Optional[str] = None):
        self.field = field
        self.message = message
        super().__init__(message, code)

    def payload(self) -> Dict[str, Any]:
        if self.field is None:
            return {"error": self.code}
        field_errors: Dict[str, List[str]] = {self.field: [self.message]}
        return {"error": {"form_errors": [], "field_errors": field_errors}}


class ExtractionError(NovaFolioError):
    """Raised when a PDF/DOCX binary cannot be parsed."""

    status_code = 422
    code = "extraction_failed"


class IndexingQueueFull(NovaFolioError):
    """Raised when the indexing backlog is saturated."""

    status_code = 503
    code = "indexing_queue_full"
