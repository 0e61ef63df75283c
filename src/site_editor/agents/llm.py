"""Azure OpenAI / Microsoft Foundry chat client factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agent_framework.azure import AzureOpenAIChatClient
from azure.identity import DefaultAzureCredential

if TYPE_CHECKING:
    from site_editor.config import OpenAIConfig

logger = logging.getLogger(__name__)


def create_chat_client(
    config: OpenAIConfig,
    *,
    deployment: str | None = None,
    use_key: str | None = None,
) -> AzureOpenAIChatClient:
    """Create an AzureOpenAIChatClient for the editor (or another) deployment.

    Uses an API key when one is given, otherwise DefaultAzureCredential:
    Azure CLI credentials in local development and managed identity in
    deployed environments.
    """
    deployment_name = deployment or config.deployment
    logger.info(
        "Chat client created — endpoint=%s deployment=%s",
        config.endpoint,
        deployment_name,
    )
    if use_key:
        return AzureOpenAIChatClient(
            endpoint=config.endpoint,
            deployment_name=deployment_name,
            api_key=use_key,
        )
    return AzureOpenAIChatClient(
        endpoint=config.endpoint,
        deployment_name=deployment_name,
        credential=DefaultAzureCredential(),
    )
