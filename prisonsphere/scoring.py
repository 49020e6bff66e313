"""Performance rating and rehabilitation score arithmetic.

Two separate metrics are derived from behavior logs:

* the work-program performance rating, on a 1-5 scale, frozen on an
  enrollment when it completes;
* the rehabilitation score, a 0-100 percentage used in inmate reports.

They use different inputs and scales and are kept apart on purpose.
"""

from dataclasses import dataclass
from typing import Iterable, Protocol

DEFAULT_PERFORMANCE_RATING = 3.0
INCIDENT_PENALTY = 5

REHABILITATION_BANDS = (
    (80, "Highly Rehabilitated"),
    (60, "Moderately Rehabilitated"),
    (40, "Partially Rehabilitated"),
)
LOWEST_BAND = "Needs More Rehabilitation"


class Ratings(Protocol):  # pylint: disable=too-few-public-methods
    """Anything carrying the four behavior rating fields."""

    work_ethic: int
    cooperation: int
    incident_reports: int
    social_skills: int


@dataclass(frozen=True)
class RehabilitationEvaluation:
    """Averages, penalty inputs and banded score of a set of logs."""

    work_ethic_avg: float
    cooperation_avg: float
    social_skills_avg: float
    incident_count: int
    score: float
    status: str


def performance_rating(logs: Iterable[Ratings]) -> float:
    """Average the four dimensions per log, incidents inverted, clamped to 1-5."""
    logs = list(logs)
    if not logs:
        return DEFAULT_PERFORMANCE_RATING

    total = sum(
        log.work_ethic + log.cooperation + log.social_skills + (5 - log.incident_reports)
        for log in logs
    )
    rating = total / (len(logs) * 4)
    return round(min(5.0, max(1.0, rating)), 2)


def rehabilitation_band(score: float) -> str:
    """Return the qualitative label for a rehabilitation score."""
    for threshold, label in REHABILITATION_BANDS:
        if score >= threshold:
            return label
    return LOWEST_BAND


def _average(values: list[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def rehabilitation_score(logs: Iterable[Ratings]) -> float:
    """Return the 0-100 rehabilitation percentage for the given logs."""
    return evaluate(logs).score


def evaluate(logs: Iterable[Ratings]) -> RehabilitationEvaluation:
    """Compute the rehabilitation evaluation of a set of behavior logs."""
    logs = list(logs)
    work_ethic_avg = _average([log.work_ethic for log in logs])
    cooperation_avg = _average([log.cooperation for log in logs])
    social_skills_avg = _average([log.social_skills for log in logs])
    incident_count = sum(log.incident_reports for log in logs)

    score = ((work_ethic_avg + cooperation_avg) / 10) * 100
    score -= INCIDENT_PENALTY * incident_count
    score = round(max(0.0, score), 2)

    return RehabilitationEvaluation(
        work_ethic_avg=round(work_ethic_avg, 2),
        cooperation_avg=round(cooperation_avg, 2),
        social_skills_avg=round(social_skills_avg, 2),
        incident_count=incident_count,
        score=score,
        status=rehabilitation_band(score),
    )
