from typing import Annotated

from fastapi import Depends

from resultdesk.schemas.result import ProcessedResult, ResultResponse
from resultdesk.schemas.student import RankedStudent
from resultdesk.services.cohort_ranking import rank_cohort
from resultdesk.services.result_store import ResultStore, result_store


def get_result_store() -> ResultStore:
    return result_store


ResultStoreDep = Annotated[ResultStore, Depends(get_result_store)]


def ranked_results(results: list[ProcessedResult]) -> list[RankedStudent]:
    """Rank stored results; the list keeps submission order."""
    return rank_cohort([r.aggregate for r in results])


def to_responses(results: list[ProcessedResult]) -> list[ResultResponse]:
    ranked = ranked_results(results)
    return [
        ResultResponse(
            id=result.id,
            file_info=result.file_info,
            aggregate=result.aggregate,
            rank=r.rank,
            total_students=len(results),
        )
        for result, r in zip(results, ranked)
    ]
