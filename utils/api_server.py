"""
FastAPI server for the screening core.

Thin HTTP adapter over `core.service`: callers send already-fetched game
session metrics and subject demographics, and receive the model risk flag
or the graded criteria. Persistence and authentication belong to the
calling application.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from core.service import ScreeningService, get_default_service
from features.vector_builder import FEATURE_COLUMNS
from utils.config_loader import get_nested_config

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Cognitive Game Screening API",
    description="Risk model and evidence-graded criteria for Go/No-Go, Stop-Signal and Tower-of-London telemetry",
    version="1.0.0"
)

# Enable CORS for the React frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173"   # Default Vite port
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_service: Optional[ScreeningService] = None


def get_service() -> ScreeningService:
    """Service used by the endpoints (default: shipped configuration)."""
    return _service or get_default_service()


def set_service(service: Optional[ScreeningService]) -> None:
    """Install a configured service (None restores the default)."""
    global _service
    _service = service


class ClassifyRiskRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    metrics: Dict[str, Any] = Field(default_factory=dict)
    profile: Dict[str, Any] = Field(default_factory=dict)
    evaluated_at: Optional[datetime] = None


class EvaluateCriteriaRequest(BaseModel):
    """Game bundle under `games`; unknown top-level keys are rejected."""
    model_config = ConfigDict(extra="forbid")

    games: Dict[str, Any] = Field(default_factory=dict)
    subject_name: Optional[str] = None


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Cognitive Game Screening API",
        "version": "1.0.0",
        "endpoints": [
            "/model",
            "/classify-risk",
            "/evaluate-criteria"
        ]
    }


@app.get("/model")
async def get_model_info() -> Dict:
    """
    Describe the loaded risk model.

    Returns:
        Model version, feature column order and decision threshold
    """
    parameters = get_service().parameters
    return {
        "version": parameters.version,
        "feature_columns": list(FEATURE_COLUMNS),
        "threshold": parameters.threshold,
    }


@app.post("/classify-risk")
async def classify_risk(request: ClassifyRiskRequest) -> Dict:
    """
    Score one game session with the risk model.

    Args:
        request: Session metrics, subject profile and optional evaluation time

    Returns:
        Prediction (0/1), probability and the model input vector
    """
    try:
        prediction = get_service().predict(
            request.metrics,
            request.profile,
            request.evaluated_at
        )
        return prediction.to_dict()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Risk classification failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/evaluate-criteria")
async def evaluate_criteria(request: EvaluateCriteriaRequest) -> Dict:
    """
    Grade the diagnostic criteria against the latest game sessions.

    Args:
        request: Per-game metrics (goNoGo, stopSignal, tol) and optional name

    Returns:
        Graded criteria, per-game risk buckets and a narrative summary
    """
    try:
        report = get_service().build_criteria_report(request.games, request.subject_name)
        return report.to_dict()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Criteria evaluation failed")
        raise HTTPException(status_code=500, detail=str(e))


def start_server(config: Optional[Dict[str, Any]] = None):
    """
    Start the API server.

    Args:
        config: Configuration dict (api.host / api.port, scoring sections)
    """
    config = config or {}
    host = get_nested_config(config, 'api.host', '127.0.0.1')
    port = int(get_nested_config(config, 'api.port', 8000))

    set_service(ScreeningService(config))

    logger.info(f"Starting screening API server at http://{host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    start_server()
