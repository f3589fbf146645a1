"""Session state: reconciles overlapping submissions and language changes.

Every user action takes the next sequence number. When an awaited
assessment or translation comes back, its result is applied only if no
newer action has started since; otherwise it is discarded. Nothing is
cancelled mid-flight.
"""

import logging

from readmission.config import ENGLISH
from readmission.errors import OrchestrationFailure, SessionBusyError, TranslationFailure
from readmission.markup import split_directives
from readmission.models import PageTextBundle, PatientIntake, SessionSnapshot, SessionState
from readmission.orchestrator import AssessmentOrchestrator
from readmission.translation import TranslationCoordinator

logger = logging.getLogger(__name__)


class SessionStateController:
    """Single writer of one session's display state."""

    def __init__(self, orchestrator: AssessmentOrchestrator, coordinator: TranslationCoordinator):
        self.orchestrator = orchestrator
        self.coordinator = coordinator
        self.state = SessionState.IDLE
        self.error: str | None = None
        # canonical: English, holds the current cycle's assessment. display: what the UI shows.
        self.canonical: PageTextBundle = coordinator.default_bundle
        self.display: PageTextBundle = coordinator.default_bundle
        self._sequence = 0

    @property
    def language(self) -> str:
        return self.coordinator.current_language

    @property
    def sequence(self) -> int:
        return self._sequence

    def _begin(self, state: SessionState) -> int:
        self._sequence += 1
        self.state = state
        self.error = None
        return self._sequence

    def _is_stale(self, sequence: int, action: str) -> bool:
        if sequence != self._sequence:
            logger.info("Discarding stale %s result (#%d, current #%d)", action, sequence, self._sequence)
            return True
        return False

    def snapshot(self) -> SessionSnapshot:
        assessment = self.display.assessment
        return SessionSnapshot(
            state=self.state,
            language=self.language,
            page=self.display,
            error=self.error,
            sequence=self._sequence,
            recommendation_segments=split_directives(assessment.recommendations) if assessment else [],
        )

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    async def submit(self, intake: PatientIntake) -> SessionSnapshot:
        """Run a new assessment. Supersedes whatever is in flight."""
        sequence = self._begin(SessionState.ASSESSING)
        self.canonical = self.canonical.model_copy(update={"assessment": None})
        self.display = self.display.model_copy(update={"assessment": None})

        try:
            assessment = await self.orchestrator.run(intake)
        except OrchestrationFailure as exc:
            if self._is_stale(sequence, "assessment"):
                return self.snapshot()
            logger.error("Assessment failed at %s stage: %r", exc.stage, exc.cause)
            self.state = SessionState.IDLE
            self.error = str(exc)
            return self.snapshot()

        if self._is_stale(sequence, "assessment"):
            return self.snapshot()
        self.canonical = self.canonical.model_copy(update={"assessment": assessment})

        language = self.language
        if language == ENGLISH:
            self.display = self.canonical
            self.state = SessionState.READY
            return self.snapshot()

        # Showing another language: bring the new assessment into it
        self.state = SessionState.TRANSLATING
        try:
            translated = await self.coordinator.translate(self.canonical, language)
        except TranslationFailure as exc:
            if self._is_stale(sequence, "translation"):
                return self.snapshot()
            self.coordinator.activate(ENGLISH)
            self.display = self.canonical
            self.state = SessionState.READY
            self.error = str(exc)
            return self.snapshot()

        if not self._is_stale(sequence, "translation"):
            self.display = translated
            self.state = SessionState.READY
        return self.snapshot()

    async def change_language(self, language: str) -> SessionSnapshot:
        """Switch the display language, always translating from the canonical English bundle."""
        self.coordinator.check_language(language)
        if self.state == SessionState.ASSESSING:
            raise SessionBusyError("Wait for the assessment to finish before changing language.")

        sequence = self._begin(SessionState.TRANSLATING)
        try:
            translated = await self.coordinator.translate(self.canonical, language)
        except TranslationFailure as exc:
            if not self._is_stale(sequence, "translation"):
                if self.canonical.assessment is not None and self.display.assessment is None:
                    # Overtook a submission's translation: show its assessment in English
                    self.coordinator.activate(ENGLISH)
                    self.display = self.canonical
                # Otherwise keep the last good display and language
                self.state = SessionState.READY
                self.error = str(exc)
            return self.snapshot()

        if not self._is_stale(sequence, "translation"):
            self.coordinator.activate(language)
            self.display = translated
            self.state = SessionState.READY
        return self.snapshot()
