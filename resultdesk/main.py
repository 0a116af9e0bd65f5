import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, status
from starlette.middleware.cors import CORSMiddleware

from resultdesk.config import settings
from resultdesk.routers import insights, reports, results

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context for application startup and shutdown."""
    logger.info(
        f"Starting result desk ({settings.environment}): scheme={settings.grading_scheme.value}, "
        f"storage={settings.storage_backend}"
    )
    yield
    logger.info("Result desk stopped")


app = FastAPI(title="Student Result Analysis System", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(results.router)
app.include_router(insights.router)
app.include_router(reports.router)


@app.get("/", status_code=status.HTTP_200_OK)
def health() -> dict[str, Any]:
    return {"success": True}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
