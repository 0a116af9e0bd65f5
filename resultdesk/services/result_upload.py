"""Service for turning uploaded mark-sheets into stored results."""

import logging
import uuid
from datetime import datetime

from resultdesk.config import settings
from resultdesk.models import GradingScheme
from resultdesk.schemas.result import FileInfo, ProcessedResult
from resultdesk.schemas.student import StudentEntry
from resultdesk.services.result_extraction import ResultExtractionService, result_extraction_service
from resultdesk.services.result_processing import build_catalog, process_student
from resultdesk.services.sample_data import sample_file_name
from resultdesk.utils.file_utils import calculate_checksum

logger = logging.getLogger(__name__)


def build_processed_result(
    entry: StudentEntry,
    file_info: FileInfo,
    extraction: ResultExtractionService | None = None,
    scheme: GradingScheme | None = None,
) -> ProcessedResult:
    """
    Compute a student's result and wrap it as a storable record.

    Raises:
        ConfigurationError: If the mark-sheet references an unknown course code
        DegenerateCohortError: If the subjects add up to zero credits or marks
    """
    extraction = extraction or result_extraction_service
    catalog = build_catalog(extraction.source.catalog)
    aggregate = process_student(entry.student_info, entry.scores, catalog, scheme or settings.grading_scheme)
    return ProcessedResult(id=str(uuid.uuid4()), file_info=file_info, aggregate=aggregate)


def process_upload(
    content: bytes,
    file_name: str,
    scheme: GradingScheme | None = None,
    extraction: ResultExtractionService | None = None,
) -> ProcessedResult:
    """
    Extract and compute the result in one uploaded PDF.

    Raises:
        ExtractionError: If the upload is not a readable mark-sheet
        ResultProcessingError: If the result cannot be computed
    """
    extraction = extraction or result_extraction_service
    entry = extraction.extract(content, file_name)
    file_info = FileInfo(
        name=file_name,
        size=len(content),
        checksum=calculate_checksum(content),
        uploaded_at=datetime.utcnow(),
    )
    result = build_processed_result(entry, file_info, extraction, scheme)
    logger.info(
        f"Processed {file_name}: {entry.student_info.roll_number} "
        f"SGPA={result.aggregate.sgpa} grade={result.aggregate.overall_grade.value}"
    )
    return result


def sample_results(
    scheme: GradingScheme | None = None,
    extraction: ResultExtractionService | None = None,
) -> list[ProcessedResult]:
    """Processed results for the whole sample roster, as if each mark-sheet had been uploaded."""
    extraction = extraction or result_extraction_service
    results = []
    for entry in extraction.source.sample_cohort():
        file_name = sample_file_name(entry.student_info)
        file_info = FileInfo(
            name=file_name,
            size=0,
            checksum=calculate_checksum(f"sample:{entry.student_info.roll_number}".encode()),
            uploaded_at=datetime.utcnow(),
        )
        results.append(build_processed_result(entry, file_info, extraction, scheme))
    return results
