"""Service for extracting mark-sheet rows from uploaded result PDFs.

Real PDF table extraction is not implemented: the roll number is read from the
file name and the rows come from the sample data source.
"""

import logging
import re

from resultdesk.schemas.student import StudentEntry
from resultdesk.services.sample_data import SampleDataSource, sample_data_source, student_info_for
from resultdesk.utils.file_utils import calculate_checksum

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"

# JNTU style roll numbers, e.g. 219F1A05A7 or 229F5A0502
ROLL_NUMBER_PATTERN = re.compile(r"(?<![0-9A-Z])(\d{3}[A-Z]\d[A-Z]\d{2}[0-9A-Z]{2})(?![0-9A-Z])", re.IGNORECASE)


class ExtractionError(Exception):
    """Raised when an upload cannot be read as a result mark-sheet."""

    pass


def extract_roll_number(file_name: str) -> str | None:
    """Find a roll number in a mark-sheet file name."""
    match = ROLL_NUMBER_PATTERN.search(file_name)
    return match.group(1).upper() if match else None


def _name_from_file_name(file_name: str, roll_number: str) -> str:
    """Take the words after the roll number as the student's name (JNTUA_Result_<roll>_<NAME>.pdf)."""
    stem = re.sub(r"\.pdf$", "", file_name, flags=re.IGNORECASE)
    _, _, tail = stem.upper().partition(roll_number)
    name = re.sub(r"[_\-\s]+", " ", tail).strip()
    return name or f"Student {roll_number}"


class ResultExtractionService:
    """Turns an uploaded PDF into raw mark-sheet rows."""

    def __init__(self, source: SampleDataSource | None = None):
        self.source = source or sample_data_source

    def extract(self, content: bytes, file_name: str) -> StudentEntry:
        """
        Extract student details and raw subject scores from a result PDF.

        Args:
            content: Raw file content
            file_name: Uploaded file name (carries the roll number)

        Returns:
            StudentEntry for the mark-sheet

        Raises:
            ExtractionError: If the content is empty or not a PDF
        """
        if not content:
            raise ExtractionError(f"File {file_name} is empty")
        if not content.startswith(PDF_MAGIC):
            raise ExtractionError(f"File {file_name} is not a PDF document")

        roll_number = extract_roll_number(file_name)
        if roll_number is None:
            if not self.source.students:
                raise ExtractionError(f"No roll number found in file name {file_name}")
            # No roll number to go on: pick a roster entry from the content so the same file maps to the same student
            index = int(calculate_checksum(content), 16) % len(self.source.students)
            student_info = self.source.students[index]
            logger.info(f"No roll number in {file_name}, using sample student {student_info.roll_number}")
        else:
            student_info = self.source.find_student(roll_number)
            if student_info is None:
                student_info = student_info_for(_name_from_file_name(file_name, roll_number), roll_number)
                logger.info(f"Roll number {roll_number} not in sample roster, generating scores")

        logger.debug(f"Extracted {len(self.source.subjects)} subject rows for {student_info.roll_number}")
        return self.source.entry_for(student_info)


result_extraction_service = ResultExtractionService()
