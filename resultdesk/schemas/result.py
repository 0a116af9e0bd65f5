from datetime import datetime

from pydantic import BaseModel, Field

from resultdesk.schemas.student import StudentAggregate


class FileInfo(BaseModel):
    """Details of the uploaded mark-sheet a result came from."""

    name: str
    size: int
    checksum: str
    uploaded_at: datetime


class ProcessedResult(BaseModel):
    """Stored record: one processed mark-sheet."""

    id: str
    file_info: FileInfo
    aggregate: StudentAggregate


class ResultResponse(ProcessedResult):
    """Processed result with its current cohort rank."""

    rank: int
    total_students: int


class ResultListResponse(BaseModel):
    """All stored results in submission order."""

    items: list[ResultResponse]
    total: int


class UploadError(BaseModel):
    """Schema for upload error details."""

    file_name: str
    error_message: str


class UploadResponse(BaseModel):
    """Schema for bulk upload response."""

    total: int  # Total files in request
    successful: int  # Processed and stored
    failed: int  # Rejected (not a PDF, duplicate, invalid result, ...)
    result_ids: list[str] = Field(default_factory=list)
    errors: list[UploadError] = Field(default_factory=list)
