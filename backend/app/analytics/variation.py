import math
from typing import Optional, Sequence

from app.core.constants import VARIATION_MIN_HR_SAMPLES
from app.core.time_utils import pace_from_speed


def _cv_percent(values: Sequence[float]) -> float:
    mean = sum(values) / len(values)
    std = math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
    return std / mean * 100


def diagnose(hr_category: str, pace_category: Optional[str]) -> str:
    if pace_category is None:
        # no pace data (e.g. treadmill without footpod)
        if hr_category == "Baixo":
            return "Controle cardíaco excelente, sem dados de ritmo"
        return "Variabilidade cardíaca alta, sem dados de ritmo"
    if hr_category == "Baixo" and pace_category == "Baixo":
        return "Ritmo consistente e controle cardíaco excelente"
    if hr_category == "Baixo" and pace_category == "Alto":
        return "Bom controle cardíaco, mas ritmo inconsistente"
    if hr_category == "Alto" and pace_category == "Baixo":
        return "Ritmo consistente, mas variabilidade cardíaca alta"
    return "Treino com alta variabilidade tanto no ritmo quanto na frequência cardíaca"


def variation_analysis(hr_samples: Sequence[float], speed_samples: Sequence[float]) -> Optional[dict]:
    """Heart-rate and pace coefficients of variation with a short diagnosis.

    Returns None when there are not enough heart-rate samples.
    """
    hrs = [h for h in hr_samples if h is not None and h > 0]
    if len(hrs) < VARIATION_MIN_HR_SAMPLES:
        return None
    paces = [pace_from_speed(s) for s in speed_samples if s is not None and s > 0]

    hr_cv = _cv_percent(hrs)
    pace_cv = _cv_percent(paces) if paces else None

    hr_category = "Baixo" if hr_cv < 10 else "Alto"
    pace_category = None if pace_cv is None else ("Baixo" if pace_cv < 15 else "Alto")

    return {
        "heart_rate_cv": round(hr_cv, 2),
        "heart_rate_category": hr_category,
        "pace_cv": round(pace_cv, 2) if pace_cv is not None else None,
        "pace_category": pace_category,
        "diagnosis": diagnose(hr_category, pace_category),
        "has_heart_rate_data": True,
        "has_pace_data": bool(paces),
        "data_points_count": len(hrs),
    }
