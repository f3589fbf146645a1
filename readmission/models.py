"""Pydantic models for the readmission risk pipeline."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from readmission.config import ENGLISH

RiskLevel = Literal["High", "Low"]


# =============================================================================
# Intake & Scoring
# =============================================================================

class PatientIntake(BaseModel):
    """Structured intake form. Immutable once submitted."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=2)
    age: int = Field(ge=0, le=120)
    gender: Literal["Male", "Female", "Other"]
    prior_inpatient_visits: int = Field(ge=0)
    diagnosis: str = Field(min_length=3)
    medications: str = Field(min_length=3)
    current_condition: str = Field(min_length=3)


class RiskVerdict(BaseModel):
    """Deterministic outcome of the risk heuristic for one intake."""
    model_config = ConfigDict(frozen=True)

    risk_level: RiskLevel
    is_emergency: bool
    score: int
    matched_diagnoses: tuple[str, ...] = ()
    matched_conditions: tuple[str, ...] = ()


# =============================================================================
# Assessment & Page Text
# =============================================================================

class Assessment(BaseModel):
    """Canonical English assessment. Translations derive copies, never mutate it."""
    model_config = ConfigDict(frozen=True)

    explanation: str
    risk_level: RiskLevel
    recommendations: str
    future_risks: str
    emergency_plan: str | None = None


class TranslatedAssessment(Assessment):
    language: str


class PageTextBundle(BaseModel):
    """Static UI strings plus the assessment currently on display."""
    model_config = ConfigDict(frozen=True)

    language: str = ENGLISH
    title: str
    description: str
    assessment: SerializeAsAny[Assessment] | None = None


# =============================================================================
# Collaborator Contracts
# =============================================================================

class ExplanationOutput(BaseModel):
    explanation: str


class RecommendationRequest(BaseModel):
    patient_summary: str
    risk_level: RiskLevel
    is_emergency: bool


class RecommendationOutput(BaseModel):
    recommendations: str
    future_risks: str
    emergency_plan: str | None = None  # only expected for emergencies


class TranslationRequest(BaseModel):
    text: str
    target_language: str


class TranslationOutput(BaseModel):
    translated_text: str


# =============================================================================
# Rendering & Session Models
# =============================================================================

class DirectiveSegment(BaseModel):
    """One piece of recommendation text: a [DO] / [DON'T] call-out or plain narrative."""
    kind: Literal["do", "dont", "text"]
    text: str


class SessionState(str, Enum):
    IDLE = "idle"
    ASSESSING = "assessing"
    TRANSLATING = "translating"
    READY = "ready"


class SessionSnapshot(BaseModel):
    """Everything the UI needs to render one session."""
    state: SessionState
    language: str
    page: PageTextBundle
    error: str | None = None
    sequence: int = 0
    recommendation_segments: list[DirectiveSegment] = []


class SessionMeta(BaseModel):
    session_id: str
    created_at: datetime


class LanguageChange(BaseModel):
    language: str


class WSMessage(BaseModel):
    """WebSocket message envelope."""
    type: str  # "submit", "language", "state", "error"
    data: dict
