"""API endpoints for cohort statistics and student comparisons."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from resultdesk.dependencies.store import ResultStoreDep
from resultdesk.schemas.cohort import CohortStatistics, ComparativeTable
from resultdesk.schemas.student import StudentPerformance
from resultdesk.services.class_statistics import summarize_cohort
from resultdesk.services.comparison import build_comparison
from resultdesk.services.result_store import ResultNotFoundError
from resultdesk.services.student_analysis import analyze_student

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/insights", tags=["insights"])


@router.get("/statistics", response_model=CohortStatistics)
async def get_cohort_statistics(
    store: ResultStoreDep,
    pass_threshold: float | None = Query(None, ge=0, le=10, description="Minimum SGPA counted as a pass"),
    top: int | None = Query(None, ge=0, description="Number of top performers to list"),
) -> CohortStatistics:
    """Class statistics over every stored result."""
    results = await store.all_results()
    logger.info(f"Calculating statistics for {len(results)} results")
    return summarize_cohort([r.aggregate for r in results], pass_threshold=pass_threshold, top_limit=top)


@router.get("/comparison", response_model=ComparativeTable)
async def get_comparison(store: ResultStoreDep) -> ComparativeTable:
    """Side-by-side comparison of every stored result."""
    results = await store.all_results()
    return build_comparison([r.aggregate for r in results])


@router.get("/results/{result_id}/performance", response_model=StudentPerformance)
async def get_student_performance(result_id: str, store: ResultStoreDep) -> StudentPerformance:
    """Strengths and weaknesses of one student."""
    try:
        result = await store.get(result_id)
    except ResultNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return analyze_student(result.aggregate)
