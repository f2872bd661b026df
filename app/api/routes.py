"""Median scoring API routes."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from median.analysis import close_to_median, summarize
from median.config import DetectorName, get_settings
from median.engine import CalculationEngine, CalculationOutcome
from median.errors import CalculationFailure, InputError
from median.models import HistoryRecord, StrategyType
from median.store import HistoryFilter

router = APIRouter(prefix="/median", tags=["Median"])

# Engine instance (will be configured in main.py)
_engine: CalculationEngine | None = None


def get_engine() -> CalculationEngine:
    """Get the calculation engine instance."""
    global _engine
    if _engine is None:
        _engine = CalculationEngine(get_settings())
    return _engine


def set_engine(engine: CalculationEngine | None) -> None:
    """Set the calculation engine instance."""
    global _engine
    _engine = engine


# --- Request/Response Models ---


class ScoreEntryRequest(BaseModel):
    """One competitor's score for the period."""

    identifier: str = Field(..., description="Competitor identifier")
    score: float = Field(..., description="Actual score for the period")
    projected_score: float | None = Field(
        default=None, description="Projected score (defaults to the actual score)"
    )


class CalculateRequest(BaseModel):
    """Request model for a median calculation."""

    entries: list[ScoreEntryRequest]
    weights: dict[str, float] | None = Field(
        default=None, description="Per-identifier weights for the weighted fallback"
    )
    close_threshold: float = Field(default=5.0, ge=0.0)


class CalculationResponse(BaseModel):
    """Response model for an accepted median result."""

    median_value: float
    strategy_used: str
    flagged_for_review: bool
    used_fallback: bool
    result: dict[str, Any]
    verdict: dict[str, Any]
    attempts: list[dict[str, Any]]
    warnings: list[str]
    states: list[str]
    duration_ms: float
    close_to_median: list[dict[str, Any]]
    summary: dict[str, Any]

    @classmethod
    def from_outcome(
        cls,
        outcome: CalculationOutcome,
        close_threshold: float = 5.0,
    ) -> "CalculationResponse":
        """Create response from domain model."""
        data = outcome.to_dict()
        return cls(
            median_value=outcome.result.median_value,
            strategy_used=outcome.result.strategy_used.value,
            flagged_for_review=outcome.result.flagged_for_review,
            used_fallback=outcome.used_fallback,
            result=data["result"],
            verdict=data["verdict"],
            attempts=data["attempts"],
            warnings=data["warnings"],
            states=data["states"],
            duration_ms=outcome.duration_ms,
            close_to_median=[
                e.to_dict() for e in close_to_median(outcome.result, close_threshold)
            ],
            summary=summarize(outcome.result),
        )


class WhatIfRequest(BaseModel):
    """Request model for a score change preview."""

    entries: list[ScoreEntryRequest]
    identifier: str
    new_score: float


class HistoryRecordResponse(BaseModel):
    """Response model for a history record."""

    timestamp: str
    median_value: float
    strategy_used: str
    calculation_duration_ms: float
    confidence: float
    quality: float
    flagged_for_review: bool

    @classmethod
    def from_record(cls, record: HistoryRecord) -> "HistoryRecordResponse":
        """Create response from domain model."""
        return cls(**record.to_dict())


class HistoryListResponse(BaseModel):
    """Response model for a list of history records."""

    records: list[HistoryRecordResponse]
    total_count: int
    returned_count: int


class HistoryStatsResponse(BaseModel):
    """Response model for history statistics."""

    total_records: int
    capacity: int
    records_by_strategy: dict[str, int]
    flagged_for_review: int
    average_median: float | None
    average_duration_ms: float | None
    storage_type: str
    is_persistent: bool


class DetectorFeedbackRequest(BaseModel):
    """A labelled outcome for one detector."""

    detector: str
    flagged: bool = Field(..., description="The detector reported a finding")
    confirmed: bool = Field(..., description="A reviewer confirmed a real anomaly")


class StrategyFeedbackRequest(BaseModel):
    """An externally measured accuracy for one strategy."""

    strategy: str
    accuracy: float = Field(..., ge=0.0, le=1.0)


def _input_error(exc: InputError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"message": str(exc), "errors": [e.to_dict() for e in exc.errors]},
    )


def _entries(entries: list[ScoreEntryRequest]) -> list[dict[str, Any]]:
    return [e.model_dump() for e in entries]


# --- Endpoints ---


@router.post("/calculate", response_model=CalculationResponse)
async def calculate_median(
    request: CalculateRequest,
    engine: CalculationEngine = Depends(get_engine),
) -> CalculationResponse:
    """Calculate the median result for a period's scores.

    The result is recorded in the rolling history. A result flagged for
    review is still returned; flagging never blocks a result.

    Raises:
        400: If the score set is invalid
        422: If no strategy produced a trustworthy result
    """
    try:
        outcome = engine.calculate(_entries(request.entries), weights=request.weights)
    except InputError as e:
        raise _input_error(e)
    except CalculationFailure as e:
        raise HTTPException(
            status_code=422,
            detail={
                "message": str(e),
                "attempts": [
                    {"strategy": a.strategy.value, **a.outcome.to_dict()} for a in e.attempts
                ],
            },
        )

    return CalculationResponse.from_outcome(outcome, request.close_threshold)


@router.post("/what-if")
async def what_if(
    request: WhatIfRequest,
    engine: CalculationEngine = Depends(get_engine),
) -> dict:
    """Preview how one changed score would move the median.

    Note: Nothing is recorded in the history.
    """
    try:
        impact = engine.what_if(_entries(request.entries), request.identifier, request.new_score)
    except InputError as e:
        raise _input_error(e)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown identifier: {request.identifier}")

    return impact.to_dict()


@router.get("/history", response_model=HistoryListResponse)
async def list_history(
    strategy: list[str] | None = Query(default=None, description="Filter by strategy used"),
    flagged_only: bool = Query(default=False),
    limit: int = Query(default=100, ge=1, le=1000),
    engine: CalculationEngine = Depends(get_engine),
) -> HistoryListResponse:
    """List recorded calculations, newest first."""
    strategies = None
    if strategy:
        try:
            strategies = [StrategyType(s) for s in strategy]
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid strategy: {e}")

    filter_criteria = HistoryFilter(
        strategies=strategies,
        flagged_only=flagged_only,
        limit=limit,
    )
    records = engine.store.query(filter_criteria)
    total_count = engine.store.count(filter_criteria)

    return HistoryListResponse(
        records=[HistoryRecordResponse.from_record(r) for r in records],
        total_count=total_count,
        returned_count=len(records),
    )


@router.get("/history/stats", response_model=HistoryStatsResponse)
async def get_history_statistics(
    engine: CalculationEngine = Depends(get_engine),
) -> HistoryStatsResponse:
    """Get rolling history statistics."""
    stats = engine.store.get_statistics()
    return HistoryStatsResponse(
        total_records=stats.get("total_records", 0),
        capacity=stats.get("capacity", engine.store.capacity),
        records_by_strategy=stats.get("records_by_strategy", {}),
        flagged_for_review=stats.get("flagged_for_review", 0),
        average_median=stats.get("average_median"),
        average_duration_ms=stats.get("average_duration_ms"),
        storage_type=stats.get("storage_type", "unknown"),
        is_persistent=stats.get("is_persistent", False),
    )


@router.get("/config")
async def get_config(
    engine: CalculationEngine = Depends(get_engine),
) -> dict:
    """Get current strategy trust and detector sensitivity."""
    return {
        "fallback_policy": engine.strategies.policy.value,
        "fallback_order": [s.value for s in engine.strategies.fallback_order()],
        **engine.config.to_dict(),
    }


@router.post("/tune")
async def run_tuning(
    engine: CalculationEngine = Depends(get_engine),
) -> dict:
    """Run one self-tuning pass over recent history and feedback."""
    return engine.tuning.run().to_dict()


@router.post("/feedback/detector")
async def submit_detector_feedback(
    request: DetectorFeedbackRequest,
    engine: CalculationEngine = Depends(get_engine),
) -> dict:
    """Record a labelled outcome for a detector.

    The outcome is applied on the next tuning pass.
    """
    try:
        detector = DetectorName(request.detector)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid detector: {request.detector}")

    ledger = engine.tuning.feedback
    ledger.record(detector, flagged=request.flagged, confirmed=request.confirmed)
    performance = ledger.performance(detector)
    return {
        "detector": detector.value,
        "performance": performance.to_dict() if performance else None,
    }


@router.post("/feedback/strategy")
async def submit_strategy_feedback(
    request: StrategyFeedbackRequest,
    engine: CalculationEngine = Depends(get_engine),
) -> dict:
    """Blend a reported accuracy into a strategy's accuracy."""
    try:
        strategy = StrategyType(request.strategy)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid strategy: {request.strategy}")

    tuning = engine.tuning.incorporate_strategy_feedback(strategy, request.accuracy)
    return {"strategy": strategy.value, **tuning.to_dict()}


@router.get("/health-metrics")
async def get_health_metrics(
    engine: CalculationEngine = Depends(get_engine),
) -> dict:
    """Get the engine health score and recent calculation metrics."""
    return engine.health_metrics()
