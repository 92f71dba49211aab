"""
Review Analyzer.

Entry point of the scoring pipeline: takes a list of reviews and returns
the per-review authenticity scores.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

import config.settings as settings
from nullfake.agents.dispatcher import ChunkDispatcher, DispatchConfig
from nullfake.clients.base import ApiClient
from nullfake.errors import ConfigurationError
from nullfake.models.result import AnalysisResult
from nullfake.models.review import Review
from nullfake.utils.events import EventSink, LoggingEventSink

logger = logging.getLogger(__name__)

ReviewInput = Union[Review, Dict[str, Any]]


class ReviewAnalyzer:
    """
    Scores product reviews for authenticity.

    Coordinates:
    1. Review coercion (raw dicts -> Review)
    2. Dispatch (single request or concurrent chunks)
    3. Result assembly
    """

    def __init__(
        self,
        client: ApiClient,
        config: Optional[DispatchConfig] = None,
        events: Optional[EventSink] = None
    ):
        """
        Initialize analyzer.

        Args:
            client: API client used for every request
            config: Dispatch parameters
            events: Observability sink shared with the dispatcher
        """
        self.client = client
        self.events = events or LoggingEventSink()
        self.dispatcher = ChunkDispatcher(client, config=config, events=self.events)

        logger.info(
            f"Initialized ReviewAnalyzer with provider={client.provider_name}, "
            f"model={client.model_name}"
        )

    @staticmethod
    def _coerce_reviews(reviews: Iterable[ReviewInput]) -> List[Review]:
        return [
            review if isinstance(review, Review) else Review.from_dict(review)
            for review in reviews
        ]

    def analyze(self, reviews: Iterable[ReviewInput]) -> AnalysisResult:
        """
        Score a batch of reviews.

        Args:
            reviews: Review objects or raw review dicts

        Returns:
            AnalysisResult; ids missing from detailed_scores were not scored

        Raises:
            ValueError: If a raw review is malformed
            ReviewAnalysisError: If a single-request batch fails after retries
        """
        reviews = self._coerce_reviews(reviews)
        if not reviews:
            return AnalysisResult()

        logger.info(f"Sending {len(reviews)} reviews to {self.client.provider_name} for analysis")
        self.events.emit("analysis_start", reviews=len(reviews))

        scores = self.dispatcher.dispatch(reviews)
        result = AnalysisResult(detailed_scores=scores)

        review_ids = {review.id for review in reviews}
        missing = len(review_ids - scores.keys())
        self.events.emit("analysis_complete", scores=len(scores), missing=missing)
        if missing:
            logger.warning(f"{missing} of {len(review_ids)} review ids received no score")

        return result


def create_client_from_env(provider: Optional[str] = None) -> ApiClient:
    """
    Create the API client selected by settings.LLM_PROVIDER.

    Raises:
        ConfigurationError: If the provider is unknown or its key is missing
    """
    provider = (provider or settings.LLM_PROVIDER).lower()

    if provider == "openai":
        from nullfake.clients.openai_http import OpenAIChatClient
        return OpenAIChatClient(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            base_url=settings.OPENAI_BASE_URL,
            user_agent=settings.USER_AGENT
        )

    if provider == "gemini":
        from nullfake.clients.gemini import GeminiChatClient
        return GeminiChatClient(
            api_key=settings.GOOGLE_API_KEY,
            model=settings.GEMINI_MODEL
        )

    raise ConfigurationError(f"Unknown LLM provider: {provider}. Must be 'openai' or 'gemini'")


def create_analyzer_from_env(
    provider: Optional[str] = None,
    **config_overrides
) -> ReviewAnalyzer:
    """Create a ReviewAnalyzer configured from config.settings."""
    client = create_client_from_env(provider)
    return ReviewAnalyzer(client, config=DispatchConfig.from_settings(**config_overrides))
