import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from mneme.application.config import resolve_config
from mneme.application.factory import build_rescheduling_service
from mneme.application.scheduling.service import ReschedulingService
from mneme.consts import VERSION

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("mneme.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Mneme Server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("Mneme Server shutting down...")


app = FastAPI(
    title="Mneme Server",
    description="Adaptive spaced-repetition scheduling.",
    version=VERSION,
    lifespan=lifespan,
)


@lru_cache(maxsize=1)
def get_service() -> ReschedulingService:
    """One service per process so the memory backend keeps its state."""
    return build_rescheduling_service(resolve_config())


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


class RescheduleRequest(BaseModel):
    user_id: str
    concept_id: str
    topic: str


class SpacedItem(BaseModel):
    user_id: str
    concept_id: str
    concept_title: str
    ease_factor: float
    interval_days: int
    repetitions: int
    last_reviewed: datetime
    next_review: datetime


class AnalysisSummary(BaseModel):
    performance_score: float
    recommended_interval: int
    confidence_trend: str
    time_efficiency: float
    next_review_date: datetime


class RescheduleResponse(BaseModel):
    success: bool
    spaced_item: SpacedItem
    analysis: AnalysisSummary


@app.post("/reschedule", response_model=RescheduleResponse)
async def reschedule(
    req: RescheduleRequest,
    service: ReschedulingService = Depends(get_service),
):
    """
    Analyze review history for a concept and store its next review date.
    """
    logger.info(f"Reschedule requested via API: {req}")

    try:
        result = await service.record_review_and_reschedule(
            req.user_id, req.concept_id, req.topic
        )
    except Exception as e:
        logger.error(f"Reschedule failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    item = result.schedule
    return RescheduleResponse(
        success=True,
        spaced_item=SpacedItem(
            user_id=item.user_id,
            concept_id=item.concept_id,
            concept_title=item.concept_title,
            ease_factor=item.ease_factor,
            interval_days=item.interval_days,
            repetitions=item.repetitions,
            last_reviewed=item.last_reviewed,
            next_review=item.next_review,
        ),
        analysis=AnalysisSummary(
            performance_score=result.analysis.overall_score,
            recommended_interval=item.interval_days,
            confidence_trend=result.analysis.confidence_trend.value,
            time_efficiency=result.analysis.time_efficiency,
            next_review_date=item.next_review,
        ),
    )
