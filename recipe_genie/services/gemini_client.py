from __future__ import annotations

import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from recipe_genie.app.domain.errors import UpstreamError

log = logging.getLogger("gemini")

DEFAULT_MODEL = "gemini-2.0-flash"


class GeminiConfigurationError(UpstreamError):
    pass


class GeminiClient:
    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._configure_api()

    def _configure_api(self) -> None:
        if not self.api_key:
            raise GeminiConfigurationError("Missing Gemini API key (GEMINI_API_KEY).")
        genai.configure(api_key=self.api_key)

    def generate_content(self, prompt: str) -> str:
        """
        Send one prompt to the model and return its raw text.

        Raises:
            UpstreamError: provider failure, blocked response or empty output
        """
        model = genai.GenerativeModel(model_name=self.model_name)
        try:
            response = model.generate_content(prompt)
        except google_exceptions.GoogleAPIError as err:
            log.warning("gemini.fail model=%s error=%s", self.model_name, err)
            raise UpstreamError(f"Gemini request failed: {err}") from err
        except OSError as err:
            # transport failures below the API layer (ConnectionError, TimeoutError)
            log.warning("gemini.transport_fail model=%s error=%s", self.model_name, err)
            raise UpstreamError(f"Gemini request failed: {err}") from err

        try:
            text = response.text
        except ValueError as err:
            # response.text raises when the candidate was blocked or has no parts
            raise UpstreamError("Gemini response did not include text content.") from err

        if not text or not text.strip():
            raise UpstreamError("Gemini returned an empty response.")
        return text
