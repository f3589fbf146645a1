"""Text-generation collaborators: Explain, Recommend and Translate over agents.Runner."""

import openai
from agents import Agent, Runner
from pydantic import BaseModel

from readmission.agents import explain_agent, recommendation_agent, translation_agent
from readmission.errors import EmptyResultError, TransientCollaboratorError
from readmission.models import (
    ExplanationOutput,
    PatientIntake,
    RecommendationOutput,
    RecommendationRequest,
    TranslationOutput,
    TranslationRequest,
)

TRANSIENT_ERRORS = (
    openai.APIConnectionError,  # includes APITimeoutError
    openai.RateLimitError,
    openai.InternalServerError,
)


# =============================================================================
# Prompt Inputs
# =============================================================================

def build_explain_input(intake: PatientIntake) -> str:
    return "\n".join([
        "Patient Information:",
        f"Name: {intake.name}",
        f"Age: {intake.age}",
        f"Gender: {intake.gender}",
        f"Previous Hospital Stays: {intake.prior_inpatient_visits}",
        f"Main Health Problem: {intake.diagnosis}",
        f"Medicines: {intake.medications}",
        f"Current Situation: {intake.current_condition}",
    ])


def build_recommendation_input(request: RecommendationRequest) -> str:
    parts = [
        f"Patient summary:\n{request.patient_summary}",
        f"\nReadmission risk level: {request.risk_level}",
    ]
    if request.is_emergency:
        parts.append("EMERGENCY: the patient's current situation is critical. Include an emergency_plan.")
    else:
        parts.append("This is not an emergency. Leave emergency_plan empty.")
    return "\n".join(parts)


def build_translation_input(request: TranslationRequest) -> str:
    return f"Target language: {request.target_language}\n\nText:\n{request.text}"


# =============================================================================
# Parsing
# =============================================================================

def parse_output(raw_output, model: type[BaseModel]) -> BaseModel:
    """Coerce an agent's final output into the expected contract model."""
    if isinstance(raw_output, model):
        return raw_output
    if isinstance(raw_output, dict):
        return model.model_validate(raw_output)
    if isinstance(raw_output, str):
        return model.model_validate_json(raw_output)
    raise EmptyResultError(f"Cannot parse {model.__name__} from {type(raw_output)}")


# =============================================================================
# Collaborators
# =============================================================================

class AgentCollaborators:
    """Live collaborators backed by openai-agents."""

    def __init__(
        self,
        explainer: Agent = explain_agent,
        recommender: Agent = recommendation_agent,
        translator: Agent = translation_agent,
    ):
        self.explainer = explainer
        self.recommender = recommender
        self.translator = translator

    async def _run(self, agent: Agent, prompt: str, model: type[BaseModel]):
        try:
            result = await Runner.run(agent, prompt)
        except TRANSIENT_ERRORS as exc:
            raise TransientCollaboratorError(f"{agent.name}: {exc}") from exc
        return parse_output(result.final_output, model)

    async def explain(self, intake: PatientIntake) -> ExplanationOutput:
        return await self._run(self.explainer, build_explain_input(intake), ExplanationOutput)

    async def recommend(self, request: RecommendationRequest) -> RecommendationOutput:
        return await self._run(
            self.recommender, build_recommendation_input(request), RecommendationOutput
        )

    async def translate(self, request: TranslationRequest) -> TranslationOutput:
        return await self._run(
            self.translator, build_translation_input(request), TranslationOutput
        )
