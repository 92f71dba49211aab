"""
Chunk Dispatcher.

Sends reviews to the language model API and collects a score map.
Large batches are split into fixed-size chunks that are requested
concurrently; small batches go out as one request with retries.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import config.settings as settings
from nullfake.agents.aggregation import merge_score_maps
from nullfake.agents.prompt_builder import CHUNK_SYSTEM_PROMPT, SYSTEM_PROMPT, build_prompt
from nullfake.agents.response_parser import parse_scores
from nullfake.clients.base import ApiClient
from nullfake.errors import ReviewAnalysisError, classify_error
from nullfake.models.result import ChatRequest, ScoreMap
from nullfake.models.review import Review
from nullfake.utils.events import EventSink, LoggingEventSink
from nullfake.utils.tokens import max_tokens_for

logger = logging.getLogger(__name__)

PARALLEL = "parallel"
SEQUENTIAL = "sequential"


@dataclass(frozen=True)
class DispatchConfig:
    """Chunking, timeout and retry parameters."""
    chunk_size: int = 25
    parallel_threshold: int = 50
    chunk_timeout: float = 60
    chunk_connect_timeout: float = 20
    batch_timeout: float = 120
    batch_connect_timeout: float = 30
    max_attempts: int = 2
    retry_backoff_seconds: float = 1.0
    mode: str = PARALLEL
    chunk_delay_seconds: float = 0.2
    max_workers: Optional[int] = None  # None: one worker per chunk
    temperature: float = 0.0
    top_p: float = 0.1

    def __post_init__(self):
        if self.chunk_size < 1:
            raise ValueError(f"Invalid chunk_size: {self.chunk_size}. Must be >= 1")
        if self.max_attempts < 1:
            raise ValueError(f"Invalid max_attempts: {self.max_attempts}. Must be >= 1")
        if self.mode not in (PARALLEL, SEQUENTIAL):
            raise ValueError(
                f"Invalid mode: {self.mode}. Must be '{PARALLEL}' or '{SEQUENTIAL}'"
            )

    @classmethod
    def from_settings(cls, **overrides) -> "DispatchConfig":
        values = dict(
            chunk_size=settings.CHUNK_SIZE,
            parallel_threshold=settings.PARALLEL_THRESHOLD,
            chunk_timeout=settings.CHUNK_TIMEOUT_SECONDS,
            chunk_connect_timeout=settings.CHUNK_CONNECT_TIMEOUT_SECONDS,
            batch_timeout=settings.BATCH_TIMEOUT_SECONDS,
            batch_connect_timeout=settings.BATCH_CONNECT_TIMEOUT_SECONDS,
            max_attempts=settings.BATCH_MAX_ATTEMPTS,
            retry_backoff_seconds=settings.BATCH_RETRY_BACKOFF_SECONDS,
            mode=settings.DISPATCH_MODE,
            chunk_delay_seconds=settings.CHUNK_DELAY_SECONDS,
            temperature=settings.LLM_TEMPERATURE,
            top_p=settings.LLM_TOP_P,
        )
        values.update(overrides)
        return cls(**values)


def chunk_reviews(reviews: Sequence[Review], chunk_size: int) -> List[List[Review]]:
    """Split reviews into contiguous chunks of chunk_size (last may be shorter)."""
    return [
        list(reviews[start:start + chunk_size])
        for start in range(0, len(reviews), chunk_size)
    ]


class ChunkDispatcher:
    """
    Dispatches reviews to the API and returns the merged score map.

    Policy:
    - empty input: no request
    - more than parallel_threshold reviews: chunked (parallel or sequential)
    - otherwise: one request with retries
    """

    def __init__(
        self,
        client: ApiClient,
        config: Optional[DispatchConfig] = None,
        events: Optional[EventSink] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize dispatcher.

        Args:
            client: API client capability
            config: Dispatch parameters (defaults to DispatchConfig())
            events: Observability sink (defaults to logging)
            sleep: Sleep function, replaceable in tests
        """
        self.client = client
        self.config = config or DispatchConfig()
        self.events = events or LoggingEventSink()
        self._sleep = sleep

    def dispatch(self, reviews: Sequence[Review]) -> ScoreMap:
        """
        Score a batch of reviews.

        Args:
            reviews: Reviews to score

        Returns:
            Review id -> score for every review that could be scored

        Raises:
            ReviewAnalysisError: Only on the single-request path, after retries
        """
        if not reviews:
            return {}

        if len(reviews) > self.config.parallel_threshold:
            logger.info(
                f"Large dataset detected ({len(reviews)} reviews), "
                f"processing in {self.config.mode} chunks"
            )
            if self.config.mode == SEQUENTIAL:
                return self._dispatch_sequential(reviews)
            return self._dispatch_parallel(reviews)

        return self._dispatch_single(reviews)

    def _build_request(self, reviews: Sequence[Review], chunked: bool) -> ChatRequest:
        prompt = build_prompt(reviews)
        max_tokens = max_tokens_for(len(reviews), self.client.model_name)

        if chunked:
            system_prompt = CHUNK_SYSTEM_PROMPT
            timeout = self.config.chunk_timeout
            connect_timeout = self.config.chunk_connect_timeout
        else:
            system_prompt = SYSTEM_PROMPT
            timeout = self.config.batch_timeout
            connect_timeout = self.config.batch_connect_timeout

        logger.debug(
            f"Request for {len(reviews)} reviews: prompt={len(prompt)} chars, "
            f"max_tokens={max_tokens}, timeout={timeout}s"
        )

        return ChatRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            max_tokens=max_tokens,
            temperature=self.config.temperature,
            top_p=self.config.top_p,
            timeout=timeout,
            connect_timeout=connect_timeout
        )

    def _restrict_to_reviews(self, scores: ScoreMap, reviews: Sequence[Review]) -> ScoreMap:
        """Drop scores for ids the model invented."""
        known_ids = {review.id for review in reviews}
        unknown = [review_id for review_id in scores if review_id not in known_ids]
        if unknown:
            logger.warning(f"Dropping {len(unknown)} scores for unknown review ids")
            self.events.emit("unknown_ids_dropped", level=logging.WARNING, count=len(unknown))
        return {
            review_id: score
            for review_id, score in scores.items()
            if review_id in known_ids
        }

    # Single request

    def _send_with_retry(self, request: ChatRequest) -> str:
        attempts = self.config.max_attempts
        attempt = 0

        while True:
            attempt += 1
            try:
                return self.client.send(request)
            except ReviewAnalysisError as e:
                classification = classify_error(e)
                if not e.transient or attempt == attempts:
                    self.events.emit(
                        "request_failed",
                        level=logging.ERROR,
                        error=classification,
                        attempts=attempt
                    )
                    raise

                logger.warning(
                    f"Request failed with {classification} error (attempt {attempt}/{attempts}), "
                    f"retrying in {self.config.retry_backoff_seconds}s"
                )
                self.events.emit(
                    "request_retry",
                    level=logging.WARNING,
                    error=classification,
                    attempt=attempt
                )
                self._sleep(self.config.retry_backoff_seconds)

    def _dispatch_single(self, reviews: Sequence[Review]) -> ScoreMap:
        request = self._build_request(reviews, chunked=False)
        logger.info(f"Sending {len(reviews)} reviews in a single request")

        content = self._send_with_retry(request)
        scores = parse_scores(content, self.events)
        return self._restrict_to_reviews(scores, reviews)

    # Chunked requests

    def _fetch_chunk(self, index: int, chunk: Sequence[Review]) -> Optional[str]:
        """Run one chunk request; None when it failed."""
        self.events.emit("chunk_start", chunk=index + 1, reviews=len(chunk))
        request = self._build_request(chunk, chunked=True)

        try:
            return self.client.send(request)
        except ReviewAnalysisError as e:
            logger.error(f"Error processing chunk {index + 1}: {e}")
            self.events.emit(
                "chunk_failed",
                level=logging.ERROR,
                chunk=index + 1,
                error=classify_error(e)
            )
        except Exception as e:
            logger.exception(f"Unexpected error processing chunk {index + 1}: {e}")
            self.events.emit(
                "chunk_failed",
                level=logging.ERROR,
                chunk=index + 1,
                error=classify_error(e)
            )
        return None

    def _score_chunk_response(
        self,
        index: int,
        chunk: Sequence[Review],
        content: Optional[str]
    ) -> ScoreMap:
        if content is None:
            return {}

        scores = self._restrict_to_reviews(parse_scores(content, self.events), chunk)
        logger.info(
            f"Processed chunk {index + 1} ({len(chunk)} reviews) with {len(scores)} scores"
        )
        self.events.emit("chunk_complete", chunk=index + 1, scores=len(scores))
        return scores

    def _dispatch_parallel(self, reviews: Sequence[Review]) -> ScoreMap:
        chunks = chunk_reviews(reviews, self.config.chunk_size)
        workers = self.config.max_workers or len(chunks)

        logger.info(f"Processing {len(chunks)} chunks in parallel for {len(reviews)} reviews")

        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._fetch_chunk, index, chunk)
                for index, chunk in enumerate(chunks)
            ]
        # Leaving the with-block waits for every chunk request
        responses = [future.result() for future in futures]

        chunk_maps = [
            self._score_chunk_response(index, chunk, content)
            for index, (chunk, content) in enumerate(zip(chunks, responses))
        ]
        scores = merge_score_maps(chunk_maps, self.events)

        logger.info(f"Parallel processing completed with {len(scores)} total scores")
        return scores

    def _dispatch_sequential(self, reviews: Sequence[Review]) -> ScoreMap:
        chunks = chunk_reviews(reviews, self.config.chunk_size)
        chunk_maps = []

        for index, chunk in enumerate(chunks):
            if index > 0:
                self._sleep(self.config.chunk_delay_seconds)

            logger.info(f"Processing chunk {index + 1} of {len(chunks)} ({len(chunk)} reviews)")
            self.events.emit("chunk_start", chunk=index + 1, reviews=len(chunk))

            try:
                scores = self._dispatch_single(chunk)
            except ReviewAnalysisError as e:
                logger.error(f"Error processing chunk {index + 1}: {e}")
                self.events.emit(
                    "chunk_failed",
                    level=logging.ERROR,
                    chunk=index + 1,
                    error=classify_error(e)
                )
                chunk_maps.append({})
                continue
            except Exception as e:
                logger.exception(f"Unexpected error processing chunk {index + 1}: {e}")
                self.events.emit(
                    "chunk_failed",
                    level=logging.ERROR,
                    chunk=index + 1,
                    error=classify_error(e)
                )
                chunk_maps.append({})
                continue

            self.events.emit("chunk_complete", chunk=index + 1, scores=len(scores))
            chunk_maps.append(scores)

        scores = merge_score_maps(chunk_maps, self.events)
        logger.info(f"Sequential processing completed with {len(scores)} total scores")
        return scores
