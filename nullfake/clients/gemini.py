"""
Gemini chat client.

Maps a ChatRequest onto google-generativeai: the system prompt becomes
the model's system instruction and sampling parameters become the
generation config.
"""

import logging
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from nullfake.clients.base import ApiClient
from nullfake.errors import ConfigurationError, TransportError, error_for_status
from nullfake.models.result import ChatRequest

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"


class GeminiChatClient(ApiClient):
    """
    Sends scoring requests to Gemini.

    A GenerativeModel is built per request because the system
    instruction differs between single-batch and chunk requests.
    """

    provider_name = "Gemini"

    def __init__(self, api_key: Optional[str], model: str = DEFAULT_MODEL):
        """
        Initialize the client.

        Args:
            api_key: Google API key; required
            model: Gemini model to use

        Raises:
            ConfigurationError: If api_key is empty
        """
        if not api_key:
            raise ConfigurationError(
                "Gemini API key is not configured. Please set GOOGLE_API_KEY in your environment."
            )

        self._model = model
        genai.configure(api_key=api_key)

        logger.info(f"Initialized GeminiChatClient with model={model}")

    @property
    def model_name(self) -> str:
        return self._model

    def send(self, request: ChatRequest) -> str:
        model = genai.GenerativeModel(
            model_name=self._model,
            generation_config={
                "temperature": request.temperature,
                "top_p": request.top_p,
                "max_output_tokens": request.max_tokens,
            },
            system_instruction=request.system_prompt
        )

        try:
            response = model.generate_content(
                request.user_prompt,
                request_options={"timeout": request.timeout}
            )
        except google_exceptions.DeadlineExceeded as e:
            logger.error(f"Gemini API timeout after {request.timeout}s: {e}")
            raise TransportError(
                "Gemini request timed out. Please try again in a few moments."
            ) from e
        except google_exceptions.GoogleAPICallError as e:
            status_code = int(e.code) if e.code is not None else 500
            logger.error(f"Gemini API error: status={status_code} message={e.message}")
            raise error_for_status(status_code, e.message, self.provider_name) from e
        except google_exceptions.RetryError as e:
            logger.error(f"Gemini API retries exhausted: {e}")
            raise TransportError(
                "Unable to connect to Gemini service. "
                "Please check your internet connection and try again."
            ) from e

        try:
            return response.text or ""
        except ValueError as e:
            # Raised when the candidate was blocked or has no text parts
            logger.warning(f"Gemini response has no text: {e}")
            return ""
