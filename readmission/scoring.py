"""Readmission risk heuristic (deterministic — no LLM)."""

from readmission.config import (
    AGE_BANDS,
    CRITICAL_CONDITIONS,
    CRITICAL_DIAGNOSES,
    RISK_THRESHOLD,
    VISIT_BANDS,
)
from readmission.models import PatientIntake, RiskVerdict


def band_points(value: int, bands: list[tuple[int, int]]) -> int:
    """Points of the highest band `value` exceeds. Bands never stack."""
    for above, points in bands:
        if value > above:
            return points
    return 0


def match_terms(text: str, terms: dict[str, int]) -> list[str]:
    """Terms contained in `text` as lower-cased substrings, in rule order.

    Substring, not word-boundary, matching: "diabetes insipidus" matches
    "diabetes".
    """
    lowered = (text or "").lower()
    return [term for term in terms if term in lowered]


def score_intake(intake: PatientIntake) -> RiskVerdict:
    """Score one intake. Pure and total: unmatched text contributes nothing."""
    score = 0
    score += band_points(intake.prior_inpatient_visits or 0, VISIT_BANDS)
    score += band_points(intake.age or 0, AGE_BANDS)

    diagnoses = match_terms(intake.diagnosis, CRITICAL_DIAGNOSES)
    score += sum(CRITICAL_DIAGNOSES[term] for term in diagnoses)

    # Critical conditions count once each, whether found in the condition or the diagnosis
    in_condition = set(match_terms(intake.current_condition, CRITICAL_CONDITIONS))
    in_diagnosis = set(match_terms(intake.diagnosis, CRITICAL_CONDITIONS))
    conditions = [term for term in CRITICAL_CONDITIONS if term in in_condition | in_diagnosis]
    score += sum(CRITICAL_CONDITIONS[term] for term in conditions)

    return RiskVerdict(
        risk_level="High" if score >= RISK_THRESHOLD else "Low",
        is_emergency=bool(conditions),
        score=score,
        matched_diagnoses=tuple(diagnoses),
        matched_conditions=tuple(conditions),
    )
