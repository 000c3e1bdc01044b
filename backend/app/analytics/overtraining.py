"""Overtraining risk from a user's recent activities.

Four factors are scored 0-100 and combined with fixed weights:

  training load   0.35  this week's load vs the trailing month's weekly average
  frequency       0.25  sessions this week + longest consecutive-day streak
  intensity       0.20  share of this week's sessions that were hard
  volume trend    0.20  weekly distance change vs the previous week

Load of one activity is duration (min) x avg HR / 100, with 100 bpm assumed
when HR is missing. All windows are anchored at `as_of`.
"""
import math
from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from app.core.constants import (
    FREQUENCY_WEIGHT,
    HIGH_INTENSITY_AVG_HR,
    HIGH_INTENSITY_MAX_HR,
    INTENSITY_WEIGHT,
    TRAINING_LOAD_WEIGHT,
    VOLUME_TREND_WEIGHT,
)

MONTH_DAYS = 30
WEEKS_PER_MONTH = MONTH_DAYS / 7

RECOMMENDATIONS = {
    "high": (
        "ATENÇÃO: Risco elevado de overtraining. Considere reduzir o volume e intensidade "
        "dos treinos. Priorize descanso e recuperação ativa. Consulte seu treinador ou "
        "médico se persistirem sinais de fadiga excessiva."
    ),
    "medium": (
        "Cuidado: Seus treinos estão intensos. Planeje dias de recuperação ativa e considere "
        "reduzir a intensidade nos próximos treinos. Monitore sinais de fadiga e qualidade do sono."
    ),
    "low": (
        "Seus treinos estão equilibrados. Continue mantendo uma boa relação entre treino e "
        "descanso. Sempre escute seu corpo e ajuste conforme necessário."
    ),
}


@dataclass(frozen=True)
class ActivityLoad:
    activity_date: date
    duration_minutes: float = 0.0
    average_hr: Optional[float] = None
    max_hr: Optional[float] = None
    distance_meters: float = 0.0

    @property
    def load(self) -> float:
        return (self.duration_minutes or 0) * (self.average_hr or 100) / 100

    @property
    def is_high_intensity(self) -> bool:
        return (self.max_hr or 0) > HIGH_INTENSITY_MAX_HR or (self.average_hr or 0) > HIGH_INTENSITY_AVG_HR


@dataclass
class OvertrainingRisk:
    score: int
    level: str
    factors: list[str] = field(default_factory=list)
    recommendation: str = ""
    training_load_score: int = 0
    frequency_score: int = 0
    intensity_score: int = 0
    volume_trend_score: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def insufficient_data() -> OvertrainingRisk:
    return OvertrainingRisk(
        score=0,
        level="low",
        factors=["Dados insuficientes"],
        recommendation="Continue registrando suas atividades para análise",
    )


def _clamp(score: float) -> float:
    return max(0.0, min(100.0, score))


def consecutive_training_days(dates: Iterable[date]) -> int:
    """Longest streak of consecutive calendar days with at least one activity."""
    days = sorted(set(dates))
    if not days:
        return 0
    longest = current = 1
    for prev, cur in zip(days, days[1:]):
        if (cur - prev).days == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


def training_load_band(ratio: float) -> tuple[int, Optional[str]]:
    if ratio > 1.5:
        return 100, "Carga de treino muito acima da média mensal"
    if ratio > 1.3:
        return 75, "Carga de treino significativamente aumentada"
    if ratio > 1.15:
        return 50, "Carga de treino moderadamente elevada"
    if ratio > 1.0:
        return 25, None
    return 0, None


def frequency_band(trainings_per_week: int, streak: int) -> tuple[int, list[str]]:
    score = 0
    factors = []
    if trainings_per_week > 6:
        score += 50
        factors.append("Treinos quase diários sem descanso adequado")
    elif trainings_per_week > 5:
        score += 35
        factors.append("Frequência de treino muito alta")
    elif trainings_per_week > 4:
        score += 20

    if streak >= 7:
        score += 50
        factors.append(f"{streak} dias consecutivos sem descanso")
    elif streak >= 5:
        score += 30
        factors.append(f"{streak} dias consecutivos de treino")
    elif streak >= 4:
        score += 15
    return score, factors


def intensity_band(ratio: float) -> tuple[int, Optional[str]]:
    if ratio > 0.7:
        return 100, "Proporção muito alta de treinos intensos"
    if ratio > 0.5:
        return 70, "Muitos treinos de alta intensidade"
    if ratio > 0.4:
        return 40, "Intensidade de treino elevada"
    return 0, None


def volume_trend_band(increase_pct: float) -> tuple[int, Optional[str]]:
    if increase_pct > 30:
        return 100, f"Aumento brusco de {increase_pct:.0f}% no volume semanal"
    if increase_pct > 20:
        return 70, f"Aumento de {increase_pct:.0f}% no volume de treino"
    if increase_pct > 10:
        return 40, "Volume de treino em crescimento acelerado"
    return 0, None


def risk_level(total: float) -> str:
    if total >= 50:
        return "high"
    if total >= 25:
        return "medium"
    return "low"


def calculate_overtraining_risk(
    activities: Sequence[ActivityLoad],
    as_of: Optional[date] = None,
) -> OvertrainingRisk:
    if not activities:
        return insufficient_data()

    as_of = as_of or date.today()
    one_week_ago = as_of - timedelta(days=7)
    two_weeks_ago = as_of - timedelta(days=14)
    one_month_ago = as_of - timedelta(days=MONTH_DAYS)

    # windows are half-open: a week is as_of-6 through as_of
    recent = [a for a in activities if a.activity_date > one_week_ago]
    monthly = [a for a in activities if a.activity_date > one_month_ago]
    previous_week = [a for a in activities if two_weeks_ago < a.activity_date <= one_week_ago]

    factors: list[str] = []

    # 1. training load
    weekly_load = sum(a.load for a in recent)
    avg_weekly_load = sum(a.load for a in monthly) / WEEKS_PER_MONTH
    load_ratio = weekly_load / avg_weekly_load if avg_weekly_load > 0 else 1.0
    training_load_score, factor = training_load_band(load_ratio)
    if factor:
        factors.append(factor)

    # 2. frequency / recovery
    streak = consecutive_training_days(a.activity_date for a in activities)
    frequency_score, freq_factors = frequency_band(len(recent), streak)
    factors.extend(freq_factors)

    # 3. accumulated intensity
    hard = sum(1 for a in recent if a.is_high_intensity)
    intensity_ratio = hard / len(recent) if recent else 0.0
    intensity_score, factor = intensity_band(intensity_ratio)
    if factor:
        factors.append(factor)

    # 4. volume trend
    current_km = sum(a.distance_meters or 0 for a in recent) / 1000
    previous_km = sum(a.distance_meters or 0 for a in previous_week) / 1000
    increase_pct = (current_km - previous_km) / previous_km * 100 if previous_km > 0 else 0.0
    volume_trend_score, factor = volume_trend_band(increase_pct)
    if factor:
        factors.append(factor)

    total = (
        _clamp(training_load_score) * TRAINING_LOAD_WEIGHT
        + _clamp(frequency_score) * FREQUENCY_WEIGHT
        + _clamp(intensity_score) * INTENSITY_WEIGHT
        + _clamp(volume_trend_score) * VOLUME_TREND_WEIGHT
    )
    level = risk_level(total)

    if not factors:
        factors.append("Carga de treino adequada")

    return OvertrainingRisk(
        score=int(math.floor(total + 0.5)),
        level=level,
        factors=factors,
        recommendation=RECOMMENDATIONS[level],
        training_load_score=int(_clamp(training_load_score)),
        frequency_score=int(_clamp(frequency_score)),
        intensity_score=int(_clamp(intensity_score)),
        volume_trend_score=int(_clamp(volume_trend_score)),
    )
