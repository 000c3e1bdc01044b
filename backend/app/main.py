import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.activities import router as activities_router
from app.api.analytics import router as analytics_router
from app.core.exceptions import AnalyticsError, ComputationError
from app.core.logging import setup_logging
from app.db import Base, engine
# import ensures tables are registered
from app.models.activity import Activity  # noqa: F401
from app.models.activity_sample import ActivitySample  # noqa: F401
from app.models.best_segment import ActivityBestSegment  # noqa: F401
from app.models.chart_data import ActivityChartData, ActivityCoordinates  # noqa: F401
from app.models.overtraining import OvertrainingBatchLog, OvertrainingScore  # noqa: F401
from app.models.performance_metrics import PerformanceMetrics  # noqa: F401
from app.models.variation_analysis import VariationAnalysis  # noqa: F401
from app.models.workout_classification import WorkoutClassification  # noqa: F401

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="PaceLab analytics")

# Allow CORS for local frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables on startup
Base.metadata.create_all(bind=engine)

app.include_router(activities_router)
app.include_router(analytics_router)


@app.exception_handler(AnalyticsError)
async def analytics_error_handler(request: Request, exc: AnalyticsError):
    context = {"activity_id": exc.activity_id, "user_id": exc.user_id}
    if isinstance(exc, ComputationError):
        logger.error("Computation failed on %s: %s", request.url.path, exc.message, extra=context)
    else:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message, extra=context)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.get("/")
def root():
    return {"message": "PaceLab analytics backend is running"}
