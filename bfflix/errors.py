"""
Failure kinds raised by the recommendation pipeline and its collaborators.

Only the orchestrator and the HTTP layer decide what each kind means for a
request:
- StoreUnavailable: degrade to live computation (never fatal)
- HistoryLoadFailed / SubscriptionLoadFailed / ModelCallFailed: fatal

Callers outside the service never see these names; the route collapses them
into a single "agent_failed" response.
"""


class RecommendationError(Exception):
    """Base class for recommendation pipeline failures."""


class StoreUnavailable(RecommendationError):
    """The recommendation cache could not be read or written."""


class HistoryLoadFailed(RecommendationError):
    """Viewing history could not be loaded (distinct from having no history)."""


class SubscriptionLoadFailed(RecommendationError):
    """Subscribed platform names could not be loaded."""


class ModelCallFailed(RecommendationError):
    """The generative model was unreachable, timed out, or returned an error."""
