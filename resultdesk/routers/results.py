import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from resultdesk.config import settings
from resultdesk.dependencies.store import ResultStoreDep, to_responses
from resultdesk.exceptions import ResultProcessingError
from resultdesk.models import GradingScheme
from resultdesk.schemas.result import ResultListResponse, ResultResponse, UploadError, UploadResponse
from resultdesk.services.result_extraction import ExtractionError
from resultdesk.services.result_store import DuplicateResultError, ResultNotFoundError
from resultdesk.services.result_upload import process_upload, sample_results

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/results", tags=["results"])


@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_results(
    store: ResultStoreDep,
    files: list[UploadFile] = File(...),
    scheme: GradingScheme | None = Form(None),
) -> UploadResponse:
    """Upload result PDFs; each file is processed on its own and failures are reported per file."""
    if len(files) > settings.upload_max_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Too many files. Maximum allowed per upload is {settings.upload_max_files}",
        )

    result_ids: list[str] = []
    errors: list[UploadError] = []

    for file in files:
        file_name = file.filename or "unknown"
        content = await file.read()

        # Validate file size
        if len(content) > settings.storage_max_size:
            errors.append(
                UploadError(
                    file_name=file_name,
                    error_message=f"File size exceeds maximum allowed size of {settings.storage_max_size} bytes",
                )
            )
            continue

        try:
            result = process_upload(content, file_name, scheme)
            stored = await store.add(result)
            result_ids.append(stored.id)
        except (ExtractionError, ResultProcessingError, DuplicateResultError) as e:
            logger.warning(f"Rejected upload {file_name}: {e}")
            errors.append(UploadError(file_name=file_name, error_message=str(e)))
        except Exception as e:
            logger.error(f"Unexpected error processing {file_name}: {e}", exc_info=True)
            errors.append(UploadError(file_name=file_name, error_message=f"Failed to process file: {str(e)}"))

    logger.info(f"Upload finished: {len(result_ids)} stored, {len(errors)} failed")
    return UploadResponse(
        total=len(files),
        successful=len(result_ids),
        failed=len(errors),
        result_ids=result_ids,
        errors=errors,
    )


@router.post("/sample", response_model=ResultListResponse, status_code=status.HTTP_201_CREATED)
async def load_sample_results(store: ResultStoreDep, scheme: GradingScheme | None = None) -> ResultListResponse:
    """Load the sample roster, skipping students that are already stored."""
    for result in sample_results(scheme):
        await store.add(result, reject_duplicates=False)

    items = to_responses(await store.all_results())
    return ResultListResponse(items=items, total=len(items))


@router.get("", response_model=ResultListResponse)
async def list_results(store: ResultStoreDep) -> ResultListResponse:
    """List stored results in submission order, each with its cohort rank."""
    items = to_responses(await store.all_results())
    return ResultListResponse(items=items, total=len(items))


@router.get("/{result_id}", response_model=ResultResponse)
async def get_result(result_id: str, store: ResultStoreDep) -> ResultResponse:
    """Get one result with its cohort rank."""
    for item in to_responses(await store.all_results()):
        if item.id == result_id:
            return item
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Result with id {result_id} not found")


@router.delete("/{result_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_result(result_id: str, store: ResultStoreDep) -> None:
    try:
        await store.remove(result_id)
    except ResultNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("", status_code=status.HTTP_200_OK)
async def clear_results(store: ResultStoreDep) -> dict:
    """Delete every stored result."""
    deleted = await store.clear()
    return {"deleted": deleted}
