"""API endpoints for Excel report downloads."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from resultdesk.dependencies.store import ResultStoreDep, ranked_results
from resultdesk.models import ExportType
from resultdesk.schemas.student import RankedStudent
from resultdesk.services.report_generator import (
    bundle_reports,
    generate_individual_report,
    generate_report,
    individual_report_filename,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
ZIP_MEDIA_TYPE = "application/zip"


def _download(content: bytes, filename: str, media_type: str = XLSX_MEDIA_TYPE) -> StreamingResponse:
    return StreamingResponse(
        iter([content]),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _ranked_cohort(store: ResultStoreDep) -> tuple[list[str], list[RankedStudent]]:
    """Result IDs and ranked students, in submission order."""
    results = await store.all_results()
    if not results:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No results to export")
    return [r.id for r in results], ranked_results(results)


@router.get("/individual/{result_id}")
async def download_individual_report(
    result_id: str,
    store: ResultStoreDep,
    include_analytics: bool = Query(True, description="Add the performance analysis sheet"),
) -> StreamingResponse:
    """Download one student's workbook; the rank shown is relative to the whole cohort."""
    ids, ranked = await _ranked_cohort(store)
    if result_id not in ids:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Result with id {result_id} not found")

    student = ranked[ids.index(result_id)]
    content = await asyncio.to_thread(generate_individual_report, student, len(ranked), include_analytics)
    return _download(content, individual_report_filename(student.aggregate))


@router.get("/individual")
async def download_all_individual_reports(
    store: ResultStoreDep,
    include_analytics: bool = Query(True, description="Add the performance analysis sheet"),
) -> StreamingResponse:
    """Download every student's workbook bundled in one ZIP archive."""
    _, ranked = await _ranked_cohort(store)
    reports = await asyncio.to_thread(
        generate_report, ExportType.INDIVIDUAL, ranked, include_analytics=include_analytics
    )
    logger.info(f"Bundling {len(reports)} individual reports")
    archive = await asyncio.to_thread(bundle_reports, reports)
    return _download(archive, "Individual_Results.zip", ZIP_MEDIA_TYPE)


@router.get("/combined")
async def download_combined_report(
    store: ResultStoreDep,
    include_comparison: bool = Query(True, description="Add the comparative analysis sheet"),
) -> StreamingResponse:
    """Download the combined workbook: summary, one sheet per student and the comparison."""
    _, ranked = await _ranked_cohort(store)
    [(filename, content)] = await asyncio.to_thread(
        generate_report, ExportType.COMBINED, ranked, include_comparison=include_comparison
    )
    return _download(content, filename)


@router.get("/summary")
async def download_summary_report(
    store: ResultStoreDep,
    include_comparison: bool = Query(True, description="Add the comparative analysis sheet"),
) -> StreamingResponse:
    """Download the class summary workbook."""
    _, ranked = await _ranked_cohort(store)
    [(filename, content)] = await asyncio.to_thread(
        generate_report, ExportType.SUMMARY, ranked, include_comparison=include_comparison
    )
    return _download(content, filename)
