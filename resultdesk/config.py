from pydantic_settings import BaseSettings

from resultdesk.models import GradingScheme


class Settings(BaseSettings):
    environment: str = "dev"
    # Grading settings
    grading_scheme: GradingScheme = GradingScheme.GRADE_LETTER
    internal_fraction: float = 0.4  # Share of marks_obtained reported as internal
    mark_floor: int = 0  # Lowest marks_obtained the computation will report
    sample_mark_floor: int = 40  # Floor applied only by the sample data source
    pass_threshold: float = 5.0  # Minimum SGPA counted as a pass
    top_performers_limit: int = 5
    # Storage settings
    storage_backend: str = "local"  # local, memory
    storage_path: str = "storage/results"
    storage_max_size: int = 10 * 1024 * 1024  # 10MB per uploaded mark-sheet
    # Upload settings
    upload_max_files: int = 100
    # Duplicate detection settings
    reject_duplicate_files: bool = True  # If True, reject duplicates; If False, return existing result


settings = Settings()  # type: ignore
