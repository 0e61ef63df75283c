"""Tests for the LLM client factory."""

from unittest.mock import patch

import pytest

from site_editor.agents.llm import create_chat_client
from site_editor.config import OpenAIConfig


@pytest.fixture
def openai_config() -> OpenAIConfig:
    return OpenAIConfig(
        endpoint="https://oai.example.com",
        deployment="gpt-4o",
        classifier_deployment="gpt-4o-mini",
    )


@pytest.mark.unit
class TestCreateChatClient:
    """Test the Create Chat Client."""

    def test_creates_client_with_api_key(self, openai_config: OpenAIConfig) -> None:
        """Verify creates client with api key."""
        with patch("site_editor.agents.llm.AzureOpenAIChatClient") as MockClient:
            client = create_chat_client(openai_config, use_key="test-api-key")

            MockClient.assert_called_once_with(
                endpoint=openai_config.endpoint,
                deployment_name=openai_config.deployment,
                api_key="test-api-key",
            )
            assert client == MockClient.return_value

    def test_creates_client_with_managed_identity(self, openai_config: OpenAIConfig) -> None:
        """Verify creates client with managed identity."""
        with (
            patch("site_editor.agents.llm.AzureOpenAIChatClient") as MockClient,
            patch("site_editor.agents.llm.DefaultAzureCredential") as MockCred,
        ):
            client = create_chat_client(openai_config)

            MockClient.assert_called_once_with(
                endpoint=openai_config.endpoint,
                deployment_name=openai_config.deployment,
                credential=MockCred.return_value,
            )
            assert client == MockClient.return_value

    def test_uses_requested_deployment(self, openai_config: OpenAIConfig) -> None:
        """Verify the classifier deployment can be selected."""
        with (
            patch("site_editor.agents.llm.AzureOpenAIChatClient") as MockClient,
            patch("site_editor.agents.llm.DefaultAzureCredential"),
        ):
            create_chat_client(openai_config, deployment=openai_config.reply_deployment)

            assert MockClient.call_args.kwargs["deployment_name"] == "gpt-4o-mini"
