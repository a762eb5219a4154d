from __future__ import annotations

from unittest.mock import MagicMock, PropertyMock, patch

import pytest
from google.api_core import exceptions as google_exceptions

from recipe_genie.app.domain.errors import UpstreamError
from recipe_genie.services.gemini_client import GeminiClient, GeminiConfigurationError


class TestGeminiClient:
    def test_missing_key(self) -> None:
        with pytest.raises(GeminiConfigurationError):
            GeminiClient(api_key="")

    def test_configures_api_key(self) -> None:
        with patch("recipe_genie.services.gemini_client.genai") as genai_mock:
            GeminiClient(api_key="secret")
        genai_mock.configure.assert_called_once_with(api_key="secret")

    def test_returns_text(self) -> None:
        with patch("recipe_genie.services.gemini_client.genai") as genai_mock:
            genai_mock.GenerativeModel.return_value.generate_content.return_value.text = "[]"
            client = GeminiClient(api_key="key", model_name="gemini-test")
            assert client.generate_content("prompt") == "[]"

        genai_mock.GenerativeModel.assert_called_once_with(model_name="gemini-test")
        genai_mock.GenerativeModel.return_value.generate_content.assert_called_once_with("prompt")

    def test_provider_error_becomes_upstream(self) -> None:
        with patch("recipe_genie.services.gemini_client.genai") as genai_mock:
            genai_mock.GenerativeModel.return_value.generate_content.side_effect = (
                google_exceptions.ServiceUnavailable("down")
            )
            client = GeminiClient(api_key="key")
            with pytest.raises(UpstreamError):
                client.generate_content("prompt")

    def test_network_error_becomes_upstream(self) -> None:
        with patch("recipe_genie.services.gemini_client.genai") as genai_mock:
            genai_mock.GenerativeModel.return_value.generate_content.side_effect = ConnectionError("reset")
            client = GeminiClient(api_key="key")
            with pytest.raises(UpstreamError):
                client.generate_content("prompt")

    def test_timeout_becomes_upstream(self) -> None:
        with patch("recipe_genie.services.gemini_client.genai") as genai_mock:
            genai_mock.GenerativeModel.return_value.generate_content.side_effect = TimeoutError("slow")
            client = GeminiClient(api_key="key")
            with pytest.raises(UpstreamError):
                client.generate_content("prompt")

    def test_programming_error_is_not_masked(self) -> None:
        with patch("recipe_genie.services.gemini_client.genai") as genai_mock:
            genai_mock.GenerativeModel.return_value.generate_content.side_effect = TypeError("bad arg")
            client = GeminiClient(api_key="key")
            with pytest.raises(TypeError):
                client.generate_content("prompt")

    def test_blocked_response_becomes_upstream(self) -> None:
        with patch("recipe_genie.services.gemini_client.genai") as genai_mock:
            response = MagicMock()
            type(response).text = PropertyMock(side_effect=ValueError("blocked"))
            genai_mock.GenerativeModel.return_value.generate_content.return_value = response
            client = GeminiClient(api_key="key")
            with pytest.raises(UpstreamError):
                client.generate_content("prompt")

    def test_empty_text_becomes_upstream(self) -> None:
        with patch("recipe_genie.services.gemini_client.genai") as genai_mock:
            genai_mock.GenerativeModel.return_value.generate_content.return_value.text = "   "
            client = GeminiClient(api_key="key")
            with pytest.raises(UpstreamError):
                client.generate_content("prompt")
