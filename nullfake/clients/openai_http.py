"""
OpenAI-compatible chat completion client over HTTP.

Works with any endpoint that accepts the /chat/completions request body
and bearer authentication (OpenAI, OpenRouter, Azure-style proxies).
"""

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter

from nullfake.clients.base import ApiClient
from nullfake.errors import ConfigurationError, TransportError, error_for_status
from nullfake.models.result import ChatRequest

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_USER_AGENT = "ReviewAnalyzer/1.0"
# One session is shared by every chunk worker thread
DEFAULT_POOL_MAXSIZE = 32


def completions_endpoint(base_url: str) -> str:
    """Append /chat/completions unless the base URL already ends with it."""
    if base_url.endswith("/chat/completions"):
        return base_url
    return base_url.rstrip("/") + "/chat/completions"


class OpenAIChatClient(ApiClient):
    """
    Sends chat completion requests with requests.

    Usage:
        client = OpenAIChatClient(api_key="sk-...")
        content = client.send(request)
    """

    provider_name = "OpenAI"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
        pool_maxsize: int = DEFAULT_POOL_MAXSIZE
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer credential; required
            model: Model identifier sent in each request body
            base_url: API base URL or full /chat/completions URL
            user_agent: User-Agent header value
            session: Optional pre-configured requests session
            pool_maxsize: Connections kept per host when the session is created here;
                should cover the number of concurrent chunk requests

        Raises:
            ConfigurationError: If api_key is empty
        """
        if not api_key:
            raise ConfigurationError(
                "OpenAI API key is not configured. Please set OPENAI_API_KEY in your environment."
            )

        self._api_key = api_key
        self._model = model
        self.endpoint = completions_endpoint(base_url)
        self.user_agent = user_agent
        self.session = session or self._create_session(pool_maxsize)

        logger.info(f"Initialized OpenAIChatClient with model={model}, endpoint={self.endpoint}")

    @staticmethod
    def _create_session(pool_maxsize: int) -> requests.Session:
        # Default adapter pools only 10 connections per host
        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=pool_maxsize)
        session = requests.Session()
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    @property
    def model_name(self) -> str:
        return self._model

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }

    def send(self, request: ChatRequest) -> str:
        payload = request.to_payload(self._model)

        try:
            response = self.session.post(
                self.endpoint,
                headers=self._headers(),
                json=payload,
                timeout=(request.connect_timeout, request.timeout)
            )
        except requests.ConnectTimeout as e:
            logger.error(f"OpenAI API connect timeout: {e}")
            raise TransportError(
                "Unable to connect to OpenAI service. "
                "Please check your internet connection and try again."
            ) from e
        except requests.Timeout as e:
            logger.error(f"OpenAI API timeout after {request.timeout}s: {e}")
            raise TransportError(
                "OpenAI request timed out. Please try again in a few moments."
            ) from e
        except requests.ConnectionError as e:
            logger.error(f"OpenAI API connection error: {e}")
            raise TransportError(
                "Unable to connect to OpenAI service. "
                "Please check your internet connection and try again."
            ) from e
        except requests.RequestException as e:
            logger.error(f"OpenAI API request error: {e}")
            raise TransportError(f"OpenAI request failed: {type(e).__name__}") from e

        if not response.ok:
            logger.error(f"OpenAI API error: status={response.status_code} body={response.text[:500]}")
            raise error_for_status(response.status_code, response.text, self.provider_name)

        try:
            data = response.json()
        except ValueError:
            logger.warning("OpenAI API returned a non-JSON body")
            return ""

        return self._extract_response_content(data)

    def _extract_response_content(self, data: Any) -> str:
        """Extract choices[0].message.content from the response body."""
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            logger.warning("OpenAI response has no choices[0].message.content")
            return ""
        return content or ""
