"""Agent definitions: explain_agent, recommendation_agent, translation_agent."""

from agents import Agent, AgentOutputSchema

from readmission.config import MODEL
from readmission.models import ExplanationOutput, RecommendationOutput, TranslationOutput


# =============================================================================
# Instructions
# =============================================================================

EXPLAIN_INSTRUCTIONS = """You are a healthcare expert.
Explain the patient information you are given in simple English that anyone can understand.
Focus on the main points that affect the patient's risk of being readmitted to hospital:
previous hospital stays, age, the main health problems, the medicines and the current situation.

Keep it to one or two short paragraphs. Do not give advice yet and do not guess a risk level."""


RECOMMENDATION_INSTRUCTIONS = """You are a discharge-planning nurse writing for a patient and their family.
You receive a plain-language summary of the patient, their readmission risk level (High or Low)
and whether their current situation is an EMERGENCY.

Produce:
- recommendations: personalized, practical steps to avoid going back to hospital.
  Write each direct instruction on its own line, starting with the literal marker [DO] or [DON'T],
  for example:
    [DO] Weigh yourself every morning and write it down.
    [DON'T] Skip doses of your water tablet, even if you feel well.
  Plain sentences without a marker are allowed for context. Never change the marker spelling.
- future_risks: a short narrative of what could go wrong in the coming months if nothing changes.
- emergency_plan: ONLY when the case is an emergency, a short numbered list of what to do RIGHT NOW
  (call emergency services first). When it is not an emergency, leave emergency_plan empty (null).

Be warm, concrete and brief. Do not mention scores or internal system details."""


TRANSLATION_INSTRUCTIONS = """You are a professional medical translator.
Translate the text you are given into the requested target language.

=== RULES ===
- Translate faithfully. Do not add, drop or summarize anything.
- Keep the literal markers [DO] and [DON'T] exactly as written, untranslated, at the same positions.
- Keep line breaks and numbering.
- Return only the translation in translated_text."""


# =============================================================================
# Agent Definitions
# =============================================================================

explain_agent = Agent(
    name="Data Explainer",
    model=MODEL,
    instructions=EXPLAIN_INSTRUCTIONS,
    output_type=ExplanationOutput,
)


recommendation_agent = Agent(
    name="Recommendations",
    model=MODEL,
    instructions=RECOMMENDATION_INSTRUCTIONS,
    # emergency_plan is optional, which strict JSON schema cannot express
    output_type=AgentOutputSchema(RecommendationOutput, strict_json_schema=False),
)


translation_agent = Agent(
    name="Translator",
    model=MODEL,
    instructions=TRANSLATION_INSTRUCTIONS,
    output_type=TranslationOutput,
)
