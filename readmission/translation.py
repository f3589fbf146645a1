"""Translation coordination: parallel per-field translation from the canonical English source."""

import asyncio
import logging

from readmission.config import DEFAULT_DESCRIPTION, DEFAULT_TITLE, ENGLISH, SUPPORTED_LANGUAGES
from readmission.errors import EmptyResultError, TranslationFailure
from readmission.models import (
    Assessment,
    PageTextBundle,
    TranslatedAssessment,
    TranslationRequest,
)
from readmission.retry import DEFAULT_POLICY, RetryPolicy, invoke

logger = logging.getLogger(__name__)

ASSESSMENT_TEXT_FIELDS = ("explanation", "recommendations", "future_risks", "emergency_plan")


def default_page_text() -> PageTextBundle:
    """The canonical English page, as configured."""
    return PageTextBundle(language=ENGLISH, title=DEFAULT_TITLE, description=DEFAULT_DESCRIPTION)


class TranslationCoordinator:
    """Fans out one translation call per text field and reassembles a translated copy.

    Sources must be canonical English. A translated bundle is never
    translated again, so switching A → B → A reproduces the English-derived
    content instead of compounding drift.
    """

    def __init__(
        self,
        collaborators,
        policy: RetryPolicy = DEFAULT_POLICY,
        sleep=asyncio.sleep,
        languages: list[str] = SUPPORTED_LANGUAGES,
        default_bundle: PageTextBundle | None = None,
    ):
        self.collaborators = collaborators
        self.policy = policy
        self.sleep = sleep
        self.languages = list(languages)
        self.default_bundle = default_bundle if default_bundle is not None else default_page_text()
        self._current_language = ENGLISH

    @property
    def current_language(self) -> str:
        return self._current_language

    def activate(self, language: str):
        """Record `language` as the one on display."""
        self.check_language(language)
        self._current_language = language

    def check_language(self, language: str):
        if language not in self.languages:
            raise ValueError(f"Unsupported language: {language}")

    # -------------------------------------------------------------------------
    # Single field
    # -------------------------------------------------------------------------

    async def translate_text(self, text: str, language: str) -> str:
        request = TranslationRequest(text=text, target_language=language)
        result = await invoke(lambda: self.collaborators.translate(request), self.policy, self.sleep)
        if not result.translated_text or not result.translated_text.strip():
            raise EmptyResultError(f"empty translation to {language}")
        return result.translated_text

    async def _translate_fields(self, fields: dict[str, str | None], language: str) -> dict:
        """Translate every non-empty field concurrently; all must succeed."""
        keys = [key for key, text in fields.items() if text]
        logger.info("Translating %d fields to %s", len(keys), language)
        tasks = [asyncio.ensure_future(self.translate_text(fields[key], language)) for key in keys]
        try:
            translated = await asyncio.gather(*tasks)
        except Exception as exc:
            # One field failed: stop the others instead of letting them retry for nothing
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.error("Translation to %s failed: %r", language, exc)
            raise TranslationFailure(language, exc) from exc
        result = dict(fields)
        result.update(zip(keys, translated))
        return result

    # -------------------------------------------------------------------------
    # Bundles
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_canonical(source: PageTextBundle | Assessment):
        assessment = source.assessment if isinstance(source, PageTextBundle) else source
        if isinstance(source, PageTextBundle) and source.language != ENGLISH:
            raise ValueError(f"Refusing to translate a {source.language} bundle; pass the English source")
        if isinstance(assessment, TranslatedAssessment):
            raise ValueError("Refusing to translate an already translated assessment")

    async def translate_assessment(self, assessment: Assessment, language: str) -> Assessment:
        self.check_language(language)
        self._check_canonical(assessment)
        if language == ENGLISH:
            return assessment
        fields = {name: getattr(assessment, name) for name in ASSESSMENT_TEXT_FIELDS}
        translated = await self._translate_fields(fields, language)
        return TranslatedAssessment(
            risk_level=assessment.risk_level, language=language, **translated
        )

    async def translate(
        self, bundle: PageTextBundle | Assessment | None, language: str
    ) -> PageTextBundle | Assessment:
        """Translated copy of `bundle` (default: the canonical page) in `language`.

        English returns the canonical source unchanged without any call.
        """
        if isinstance(bundle, Assessment):
            return await self.translate_assessment(bundle, language)
        if bundle is None:
            bundle = self.default_bundle
        self.check_language(language)
        self._check_canonical(bundle)
        if language == ENGLISH:
            return bundle

        fields = {"title": bundle.title, "description": bundle.description}
        if bundle.assessment is not None:
            for name in ASSESSMENT_TEXT_FIELDS:
                fields[f"assessment.{name}"] = getattr(bundle.assessment, name)
        translated = await self._translate_fields(fields, language)

        assessment = None
        if bundle.assessment is not None:
            assessment = TranslatedAssessment(
                risk_level=bundle.assessment.risk_level,
                language=language,
                **{name: translated[f"assessment.{name}"] for name in ASSESSMENT_TEXT_FIELDS},
            )
        return PageTextBundle(
            language=language,
            title=translated["title"],
            description=translated["description"],
            assessment=assessment,
        )
