"""Assessment orchestration: explanation → scoring → recommendations."""

import asyncio
import logging

from readmission.errors import (
    DataExplanationFailure,
    EmptyResultError,
    RecommendationFailure,
)
from readmission.models import Assessment, PatientIntake, RecommendationRequest, RiskVerdict
from readmission.retry import DEFAULT_POLICY, RetryPolicy, invoke
from readmission.scoring import score_intake

logger = logging.getLogger(__name__)


class AssessmentOrchestrator:
    """Runs one assessment per submission. Any stage failure aborts the run.

    `collaborators` needs async `explain(intake)` and `recommend(request)`
    methods (see `readmission.collaborators.AgentCollaborators`).
    """

    def __init__(self, collaborators, policy: RetryPolicy = DEFAULT_POLICY, sleep=asyncio.sleep):
        self.collaborators = collaborators
        self.policy = policy
        self.sleep = sleep

    async def explain(self, intake: PatientIntake) -> str:
        try:
            result = await invoke(lambda: self.collaborators.explain(intake), self.policy, self.sleep)
        except Exception as exc:
            raise DataExplanationFailure("Could not generate data explanation.", exc) from exc
        if not result.explanation or not result.explanation.strip():
            raise DataExplanationFailure(
                "Could not generate data explanation.",
                EmptyResultError("explanation is empty"),
            )
        return result.explanation

    async def recommend(self, explanation: str, verdict: RiskVerdict):
        request = RecommendationRequest(
            patient_summary=explanation,
            risk_level=verdict.risk_level,
            is_emergency=verdict.is_emergency,
        )
        try:
            result = await invoke(lambda: self.collaborators.recommend(request), self.policy, self.sleep)
        except Exception as exc:
            raise RecommendationFailure("Could not generate recommendations.", exc) from exc
        missing = [
            field for field in ("recommendations", "future_risks")
            if not (getattr(result, field) or "").strip()
        ]
        if missing:
            raise RecommendationFailure(
                "Could not generate recommendations.",
                EmptyResultError(f"empty {', '.join(missing)}"),
            )
        return result

    async def run(self, intake: PatientIntake) -> Assessment:
        explanation = await self.explain(intake)
        logger.info("Explanation ready (%d chars)", len(explanation))

        verdict = score_intake(intake)
        logger.info(
            "Risk scored: level=%s score=%d emergency=%s",
            verdict.risk_level, verdict.score, verdict.is_emergency,
        )

        recommendation = await self.recommend(explanation, verdict)

        # Recommendation text (with its [DO]/[DON'T] markers) passes through untouched
        emergency_plan = recommendation.emergency_plan if verdict.is_emergency else None
        return Assessment(
            explanation=explanation,
            risk_level=verdict.risk_level,
            recommendations=recommendation.recommendations,
            future_risks=recommendation.future_risks,
            emergency_plan=emergency_plan or None,
        )
