from alembic import context
from sqlalchemy import engine_from_config, pool

from app.core.config import settings
from app.db import Base
# import ensures tables are registered on Base.metadata
from app.models.activity import Activity  # noqa: F401
from app.models.activity_sample import ActivitySample  # noqa: F401
from app.models.best_segment import ActivityBestSegment  # noqa: F401
from app.models.chart_data import ActivityChartData, ActivityCoordinates  # noqa: F401
from app.models.overtraining import OvertrainingBatchLog, OvertrainingScore  # noqa: F401
from app.models.performance_metrics import PerformanceMetrics  # noqa: F401
from app.models.variation_analysis import VariationAnalysis  # noqa: F401
from app.models.workout_classification import WorkoutClassification  # noqa: F401

config = context.config

if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
