"""Per-activity derived metrics with the user-facing comment bands.

Every metric is optional: when the aggregate or samples it needs are missing
its fields are simply left out of the result.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class ActivityAggregates:
    average_hr: Optional[float] = None
    max_hr: Optional[float] = None
    duration_seconds: Optional[float] = None
    distance_meters: Optional[float] = None
    average_speed_mps: Optional[float] = None
    active_kilocalories: Optional[float] = None


def pace_variation_coefficient(speeds: Sequence[float]) -> Optional[float]:
    """Population stddev / mean of positive speed samples, in percent."""
    values = [s for s in speeds if s is not None and s > 0]
    if len(values) < 2:
        return None
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return round(math.sqrt(variance) / mean * 100, 1)


def pace_comment(cv: float) -> str:
    if cv <= 15:
        return "Ritmo muito consistente"
    if cv <= 25:
        return "Ritmo moderadamente consistente"
    return "Ritmo inconsistente"


def relative_intensity(avg_hr: float, max_hr: float) -> float:
    return round(avg_hr / max_hr * 100, 1)


def relative_reserve(avg_hr: float, max_hr: float, resting_hr: float = 60) -> Optional[float]:
    reserve = max_hr - resting_hr
    if reserve <= 0:
        return None
    return round((avg_hr - resting_hr) / reserve * 100, 1)


def heart_rate_comment(intensity: float) -> str:
    if intensity >= 90:
        return "Intensidade muito alta"
    if intensity >= 80:
        return "Intensidade alta"
    if intensity >= 70:
        return "Intensidade moderada"
    return "Intensidade baixa"


def effort_distribution(hr_samples: Sequence[float]) -> Optional[tuple[int, int, int]]:
    """Average HR of three equal-length chronological thirds.

    The last third takes the remainder when the count is not divisible by 3.
    """
    hrs = [h for h in hr_samples if h is not None]
    if len(hrs) < 3:
        return None
    third = len(hrs) // 3
    beginning = round(sum(hrs[:third]) / third)
    middle = round(sum(hrs[third:2 * third]) / third)
    end = round(sum(hrs[2 * third:]) / (len(hrs) - 2 * third))
    return int(beginning), int(middle), int(end)


def effort_comment(beginning: int, middle: int, end: int) -> str:
    spread = max(beginning, middle, end) - min(beginning, middle, end)
    if spread <= 10:
        return "Esforço muito consistente"
    if spread <= 20:
        return "Esforço moderadamente consistente"
    return "Esforço variável"


def efficiency_comment(power_per_beat: float) -> str:
    if power_per_beat >= 0.08:
        return "Excelente eficiência energética"
    if power_per_beat >= 0.06:
        return "Boa eficiência energética"
    if power_per_beat >= 0.04:
        return "Eficiência moderada"
    return "Baixa eficiência energética"


def calculate_performance_metrics(
    activity: ActivityAggregates,
    speed_samples: Sequence[float] = (),
    hr_samples: Sequence[float] = (),
    resting_hr: float = 60,
) -> dict:
    metrics: dict = {}

    if activity.average_hr and activity.duration_seconds:
        total_beats = activity.average_hr * (activity.duration_seconds / 60)
        if activity.active_kilocalories and total_beats > 0:
            metrics["power_per_beat"] = round(activity.active_kilocalories / total_beats, 2)
            metrics["efficiency_comment"] = efficiency_comment(metrics["power_per_beat"])
        if activity.distance_meters:
            metrics["distance_per_minute"] = round(
                activity.distance_meters / (activity.duration_seconds / 60), 1
            )

    if activity.average_speed_mps:
        metrics["average_speed_kmh"] = round(activity.average_speed_mps * 3.6, 1)

    cv = pace_variation_coefficient(speed_samples)
    if cv is not None:
        metrics["pace_variation_coefficient"] = cv
        metrics["pace_comment"] = pace_comment(cv)

    if activity.average_hr:
        metrics["average_hr"] = int(round(activity.average_hr))
        if activity.max_hr:
            intensity = relative_intensity(activity.average_hr, activity.max_hr)
            metrics["relative_intensity"] = intensity
            reserve = relative_reserve(activity.average_hr, activity.max_hr, resting_hr)
            if reserve is not None:
                metrics["relative_reserve"] = reserve
            metrics["heart_rate_comment"] = heart_rate_comment(intensity)

    thirds = effort_distribution(hr_samples)
    if thirds is not None:
        beginning, middle, end = thirds
        metrics["effort_beginning_bpm"] = beginning
        metrics["effort_middle_bpm"] = middle
        metrics["effort_end_bpm"] = end
        metrics["effort_distribution_comment"] = effort_comment(beginning, middle, end)

    return metrics
