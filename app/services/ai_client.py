import logging
from typing import Dict, List, Optional

import requests
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from app.core.config import AISettings
from app.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


def _is_transient(exc: BaseException) -> bool:
    """Connection drops, timeouts, throttling and 5xx are worth another attempt."""
    if isinstance(exc, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return True
    if isinstance(exc, requests.exceptions.HTTPError) and exc.response is not None:
        return exc.response.status_code == 429 or exc.response.status_code >= 500
    return False


class AIClient:
    """
    Chat-completions client for the external reasoning service
    (any OpenAI-compatible endpoint). Every failure surfaces as
    ExternalServiceError so callers have a single thing to catch.
    """

    def __init__(self, ai_settings: AISettings, http: Optional[requests.Session] = None):
        if not ai_settings.api_key:
            raise ValueError("An API key is required to call the reasoning service.")
        self.settings = ai_settings
        # None: every call is a standalone requests.post, no shared Session
        self._http = http

    @property
    def provider(self) -> str:
        return self.settings.provider

    def _do_call(self, messages: List[Dict[str, str]], model_name: str) -> str:
        logger.info(f"Calling AI Model: {model_name}")
        response = (self._http or requests).post(
            self.settings.base_url,
            headers={
                "Authorization": f"Bearer {self.settings.api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": model_name,
                "messages": messages,
                "max_tokens": self.settings.max_tokens,
                "temperature": self.settings.temperature,
            },
            timeout=self.settings.timeout_seconds,
        )
        response.raise_for_status()
        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError(f"Malformed completion envelope: {e}")
        if not content:
            raise ExternalServiceError("Empty response from AI service.")
        return content

    def _call_with_retries(self, messages: List[Dict[str, str]], model_name: str) -> str:
        retrying = Retrying(
            stop=stop_after_attempt(max(1, self.settings.max_retries)),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )
        try:
            return retrying(self._do_call, messages, model_name)
        except ExternalServiceError:
            raise
        except requests.exceptions.Timeout:
            logger.error("AI service timeout.")
            raise ExternalServiceError("AI service reached timeout limit.")
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"AI service HTTP error: {e}")
            raise ExternalServiceError(f"AI service returned error: {status}")
        except requests.exceptions.RequestException as e:
            logger.error(f"AI service unreachable: {e}")
            raise ExternalServiceError(f"AI service unreachable: {e}")

    def call_model(self, messages: List[Dict[str, str]]) -> str:
        """Primary model first, then the configured fallback model if any."""
        try:
            return self._call_with_retries(messages, self.settings.model_name)
        except ExternalServiceError as e:
            if not self.settings.fallback_model:
                raise
            logger.warning(f"Primary model {self.settings.model_name} failed: {e.message}. Attempting fallback.")
            try:
                return self._call_with_retries(messages, self.settings.fallback_model)
            except ExternalServiceError as fe:
                raise ExternalServiceError(
                    f"AI service completely unavailable (Primary: {e.message}, Fallback: {fe.message})"
                )
