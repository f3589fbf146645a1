"""Test configuration and fixtures: in-memory collaborators, no network."""

import asyncio

import pytest

from readmission.models import (
    ExplanationOutput,
    PatientIntake,
    RecommendationOutput,
    TranslationOutput,
)
from readmission.orchestrator import AssessmentOrchestrator
from readmission.retry import RetryPolicy
from readmission.session import SessionStateController
from readmission.translation import TranslationCoordinator


class SleepRecorder:
    """Stands in for asyncio.sleep; records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class FakeCollaborators:
    """Explain / Recommend / Translate with call counters and scripted failures.

    - `explain_errors` / `recommend_errors`: exceptions raised, in order, before succeeding
    - `translate_errors`: {language: exception} raised on every call for that language
    - `gates`: {patient name: asyncio.Event} the explanation waits on
    - `translate_gate`: asyncio.Event every translation waits on
    """

    def __init__(self):
        self.explanation = "An older patient with heart and sugar problems."
        self.recommendation = RecommendationOutput(
            recommendations="Take medicines daily.\n[DO] Weigh yourself every morning.\n[DON'T] Skip doses.",
            future_risks="Fluid may build up again.",
            emergency_plan="1. Call emergency services now.",
        )
        self.explain_errors: list[Exception] = []
        self.recommend_errors: list[Exception] = []
        self.translate_errors: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.translate_gate: asyncio.Event | None = None
        self.calls = {"explain": 0, "recommend": 0, "translate": 0}
        self.recommend_requests = []
        self.translate_requests = []

    async def explain(self, intake):
        self.calls["explain"] += 1
        if intake.name in self.gates:
            await self.gates[intake.name].wait()
        if self.explain_errors:
            raise self.explain_errors.pop(0)
        return ExplanationOutput(explanation=f"{self.explanation} ({intake.name})")

    async def recommend(self, request):
        self.calls["recommend"] += 1
        self.recommend_requests.append(request)
        if self.recommend_errors:
            raise self.recommend_errors.pop(0)
        return self.recommendation

    async def translate(self, request):
        self.calls["translate"] += 1
        self.translate_requests.append(request)
        if self.translate_gate is not None:
            await self.translate_gate.wait()
        await asyncio.sleep(0)
        if request.target_language in self.translate_errors:
            raise self.translate_errors[request.target_language]
        return TranslationOutput(translated_text=f"<{request.target_language}> {request.text}")


@pytest.fixture
def collaborators():
    return FakeCollaborators()


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def policy():
    return RetryPolicy(max_attempts=3, base_delay=1.0)


@pytest.fixture
def orchestrator(collaborators, policy, sleeper):
    return AssessmentOrchestrator(collaborators, policy, sleeper)


@pytest.fixture
def coordinator(collaborators, policy, sleeper):
    return TranslationCoordinator(collaborators, policy, sleeper)


@pytest.fixture
def controller(orchestrator, coordinator):
    return SessionStateController(orchestrator, coordinator)


@pytest.fixture
def make_intake():
    def _make(**overrides):
        fields = {
            "name": "Jane Doe",
            "age": 55,
            "gender": "Female",
            "prior_inpatient_visits": 1,
            "diagnosis": "Chronic Heart Failure, Type 2 Diabetes",
            "medications": "Lisinopril, Metformin, Furosemide",
            "current_condition": "Feeling tired and occasionally dizzy.",
        }
        fields.update(overrides)
        return PatientIntake(**fields)
    return _make


@pytest.fixture
def intake(make_intake):
    return make_intake()
