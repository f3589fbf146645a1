"""Error taxonomy for the assessment pipeline."""


class RiskRadarError(Exception):
    """Base class for every pipeline error."""


class TransientCollaboratorError(RiskRadarError):
    """Rate limit, timeout or connection failure talking to a collaborator. Retryable."""


class EmptyResultError(RiskRadarError):
    """A collaborator answered successfully but left required text empty."""


class OrchestrationFailure(RiskRadarError):
    """An assessment stage failed terminally. No partial assessment exists."""

    stage = "assessment"

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class DataExplanationFailure(OrchestrationFailure):
    stage = "explanation"


class RecommendationFailure(OrchestrationFailure):
    stage = "recommendation"


class TranslationFailure(RiskRadarError):
    """A coordinated translation failed; the caller must keep the last good language."""

    def __init__(self, language: str, cause: BaseException | None = None):
        super().__init__(f"Translation to {language} failed: {cause}")
        self.language = language
        self.cause = cause


class SessionBusyError(RiskRadarError):
    """A language change arrived while an assessment is still running."""
