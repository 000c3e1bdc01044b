"""initial analytics schema

Revision ID: 3e1c9a7d2b40
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3e1c9a7d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')
NOW = sa.text('CURRENT_TIMESTAMP')


def upgrade() -> None:
    op.create_table(
        'activities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('activity_id', sa.String(), nullable=False),
        sa.Column('activity_source', sa.String(20), nullable=False, server_default='manual'),
        sa.Column('activity_type', sa.String(40), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('activity_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('distance_meters', sa.Float(), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('average_heart_rate', sa.Integer(), nullable=True),
        sa.Column('max_heart_rate', sa.Integer(), nullable=True),
        sa.Column('average_speed_mps', sa.Float(), nullable=True),
        sa.Column('active_kilocalories', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.UniqueConstraint('user_id', 'activity_id', name='uq_activities_user_activity'),
    )
    op.create_index('ix_activities_id', 'activities', ['id'])
    op.create_index('ix_activities_user_id', 'activities', ['user_id'])
    op.create_index('ix_activities_activity_id', 'activities', ['activity_id'])
    op.create_index('ix_activities_activity_date', 'activities', ['activity_date'])

    op.create_table(
        'activity_samples',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('activity_id', sa.String(), nullable=False),
        sa.Column('idx', sa.Integer(), nullable=False),
        sa.Column('timestamp_seconds', sa.Float(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('distance_meters', sa.Float(), nullable=True),
        sa.Column('heart_rate', sa.Integer(), nullable=True),
        sa.Column('speed_mps', sa.Float(), nullable=True),
        sa.Column('power_watts', sa.Float(), nullable=True),
        sa.Column('elevation_meters', sa.Float(), nullable=True),
    )
    op.create_index('ix_activity_samples_id', 'activity_samples', ['id'])
    op.create_index('ix_activity_samples_user_activity', 'activity_samples', ['user_id', 'activity_id'])

    op.create_table(
        'activity_chart_data',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('activity_id', sa.String(), nullable=False),
        sa.Column('activity_source', sa.String(20), nullable=True),
        sa.Column('series_data', JSONType, nullable=False),
        sa.Column('data_points_count', sa.Integer(), nullable=False),
        sa.Column('hr_zones', JSONType, nullable=True),
        sa.Column('duration_seconds', sa.Float(), nullable=True),
        sa.Column('total_distance_meters', sa.Float(), nullable=True),
        sa.Column('avg_speed_ms', sa.Float(), nullable=True),
        sa.Column('avg_pace_min_km', sa.Float(), nullable=True),
        sa.Column('avg_heart_rate', sa.Integer(), nullable=True),
        sa.Column('max_heart_rate', sa.Integer(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.UniqueConstraint('user_id', 'activity_id', name='uq_chart_data_user_activity'),
    )
    op.create_index('ix_activity_chart_data_id', 'activity_chart_data', ['id'])
    op.create_index('ix_activity_chart_data_user_id', 'activity_chart_data', ['user_id'])

    op.create_table(
        'activity_coordinates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('activity_id', sa.String(), nullable=False),
        sa.Column('activity_source', sa.String(20), nullable=True),
        sa.Column('coordinates', JSONType, nullable=False),
        sa.Column('bounds', JSONType, nullable=True),
        sa.Column('total_points', sa.Integer(), nullable=False),
        sa.Column('sampled_points', sa.Integer(), nullable=False),
        sa.Column('starting_latitude', sa.Float(), nullable=True),
        sa.Column('starting_longitude', sa.Float(), nullable=True),
        sa.UniqueConstraint('user_id', 'activity_id', name='uq_coordinates_user_activity'),
    )
    op.create_index('ix_activity_coordinates_id', 'activity_coordinates', ['id'])
    op.create_index('ix_activity_coordinates_user_id', 'activity_coordinates', ['user_id'])

    op.create_table(
        'activity_best_segments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('activity_id', sa.String(), nullable=False),
        sa.Column('activity_date', sa.Date(), nullable=True),
        sa.Column('segment_distance_meters', sa.Float(), nullable=False),
        sa.Column('best_pace_min_km', sa.Float(), nullable=False),
        sa.Column('segment_start_timestamp', sa.Float(), nullable=False),
        sa.Column('segment_end_timestamp', sa.Float(), nullable=False),
        sa.Column('segment_start_distance_meters', sa.Float(), nullable=False),
        sa.Column('segment_end_distance_meters', sa.Float(), nullable=False),
        sa.Column('segment_duration_seconds', sa.Float(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.UniqueConstraint(
            'user_id', 'activity_id', 'segment_distance_meters',
            name='uq_best_segments_user_activity_distance',
        ),
    )
    op.create_index('ix_activity_best_segments_id', 'activity_best_segments', ['id'])
    op.create_index('ix_activity_best_segments_user_id', 'activity_best_segments', ['user_id'])

    op.create_table(
        'performance_metrics',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('activity_id', sa.String(), nullable=False),
        sa.Column('power_per_beat', sa.Float(), nullable=True),
        sa.Column('distance_per_minute', sa.Float(), nullable=True),
        sa.Column('efficiency_comment', sa.String(), nullable=True),
        sa.Column('average_speed_kmh', sa.Float(), nullable=True),
        sa.Column('pace_variation_coefficient', sa.Float(), nullable=True),
        sa.Column('pace_comment', sa.String(), nullable=True),
        sa.Column('average_hr', sa.Integer(), nullable=True),
        sa.Column('relative_intensity', sa.Float(), nullable=True),
        sa.Column('relative_reserve', sa.Float(), nullable=True),
        sa.Column('heart_rate_comment', sa.String(), nullable=True),
        sa.Column('effort_beginning_bpm', sa.Integer(), nullable=True),
        sa.Column('effort_middle_bpm', sa.Integer(), nullable=True),
        sa.Column('effort_end_bpm', sa.Integer(), nullable=True),
        sa.Column('effort_distribution_comment', sa.String(), nullable=True),
        sa.Column('calculated_at', sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.UniqueConstraint('user_id', 'activity_id', name='uq_performance_metrics_user_activity'),
    )
    op.create_index('ix_performance_metrics_id', 'performance_metrics', ['id'])
    op.create_index('ix_performance_metrics_user_id', 'performance_metrics', ['user_id'])

    op.create_table(
        'variation_analysis',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('activity_id', sa.String(), nullable=False),
        sa.Column('heart_rate_cv', sa.Float(), nullable=False),
        sa.Column('heart_rate_category', sa.String(10), nullable=False),
        sa.Column('pace_cv', sa.Float(), nullable=True),
        sa.Column('pace_category', sa.String(10), nullable=True),
        sa.Column('diagnosis', sa.String(), nullable=False),
        sa.Column('has_heart_rate_data', sa.Boolean(), nullable=False),
        sa.Column('has_pace_data', sa.Boolean(), nullable=False),
        sa.Column('data_points_count', sa.Integer(), nullable=False),
        sa.UniqueConstraint('user_id', 'activity_id', name='uq_variation_analysis_user_activity'),
    )
    op.create_index('ix_variation_analysis_id', 'variation_analysis', ['id'])
    op.create_index('ix_variation_analysis_user_id', 'variation_analysis', ['user_id'])

    op.create_table(
        'workout_classification',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('activity_id', sa.String(), nullable=False),
        sa.Column('detected_workout_type', sa.String(30), nullable=False),
        sa.Column('metrics', JSONType, nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.UniqueConstraint('user_id', 'activity_id', name='uq_workout_classification_user_activity'),
    )
    op.create_index('ix_workout_classification_id', 'workout_classification', ['id'])
    op.create_index('ix_workout_classification_user_id', 'workout_classification', ['user_id'])

    op.create_table(
        'overtraining_scores',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('level', sa.String(10), nullable=False),
        sa.Column('factors', JSONType, nullable=False),
        sa.Column('recommendation', sa.String(), nullable=True),
        sa.Column('training_load_score', sa.Integer(), nullable=False),
        sa.Column('frequency_score', sa.Integer(), nullable=False),
        sa.Column('intensity_score', sa.Integer(), nullable=False),
        sa.Column('volume_trend_score', sa.Integer(), nullable=False),
        sa.Column('activities_analyzed', sa.Integer(), nullable=False),
        sa.Column('days_analyzed', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=NOW),
    )
    op.create_index('ix_overtraining_scores_id', 'overtraining_scores', ['id'])
    op.create_index('ix_overtraining_scores_user_id', 'overtraining_scores', ['user_id'])
    op.create_index('ix_overtraining_scores_created_at', 'overtraining_scores', ['created_at'])

    op.create_table(
        'overtraining_batch_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='running'),
        sa.Column('batch_size', sa.Integer(), nullable=False),
        sa.Column('days_active_threshold', sa.Integer(), nullable=False),
        sa.Column('total_users_processed', sa.Integer(), nullable=True),
        sa.Column('successful_calculations', sa.Integer(), nullable=True),
        sa.Column('failed_calculations', sa.Integer(), nullable=True),
        sa.Column('execution_time_seconds', sa.Integer(), nullable=True),
        sa.Column('error_message', sa.String(), nullable=True),
        sa.Column('metadata', JSONType, nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False, server_default=NOW),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_overtraining_batch_logs_id', 'overtraining_batch_logs', ['id'])


def downgrade() -> None:
    for table in (
        'overtraining_batch_logs',
        'overtraining_scores',
        'workout_classification',
        'variation_analysis',
        'performance_metrics',
        'activity_best_segments',
        'activity_coordinates',
        'activity_chart_data',
        'activity_samples',
        'activities',
    ):
        op.drop_table(table)
