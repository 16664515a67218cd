"""
Dependency injection for the advisor bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the advisor context.
"""

from fastapi import Request

from kalshorb.application.advisor.chat import ChatUseCase
from kalshorb.application.advisor.dispatch import AdvisorDispatcher
from kalshorb.application.advisor.quick_action import QuickActionUseCase
from kalshorb.core.config import Settings
from kalshorb.infrastructure.advisor.account_context_repository import (
    AccountContextRepositoryAdapter,
)
from kalshorb.infrastructure.advisor.message_repository import (
    MessageRepositoryAdapter,
)
from kalshorb.infrastructure.advisor.openrouter_adapter import OpenRouterAdapter
from kalshorb.infrastructure.advisor.prompt_loader import get_prompt_loader
from kalshorb.infrastructure.advisor.rest_client import RestDatastoreClient
from kalshorb.infrastructure.advisor.session_repository import (
    SessionRepositoryAdapter,
)


def _get_datastore_client(config: Settings) -> RestDatastoreClient:
    """Build the REST datastore client from application settings."""
    return RestDatastoreClient(
        base_url=config.supabase_url,
        service_key=config.supabase_service_role_key,
        timeout=config.http_timeout_seconds,
    )


def _get_completion_adapter(config: Settings) -> OpenRouterAdapter:
    """Build the OpenRouter adapter from application settings."""
    return OpenRouterAdapter(
        api_key=config.openrouter_api_key,
        model=config.openrouter_model,
        base_url=config.openrouter_base_url,
        temperature=config.openrouter_temperature,
        max_tokens=config.openrouter_max_tokens,
        referer=config.openrouter_referer,
        title=config.openrouter_title,
        timeout=config.http_timeout_seconds,
    )


def build_advisor_dispatcher(config: Settings) -> AdvisorDispatcher:
    """Build AdvisorDispatcher and both use cases from explicit settings."""
    client = _get_datastore_client(config)
    completion = _get_completion_adapter(config)
    prompts = get_prompt_loader().prompt_set()

    chat = ChatUseCase(
        message_store=MessageRepositoryAdapter(client),
        session_store=SessionRepositoryAdapter(client),
        context_reader=AccountContextRepositoryAdapter(
            client, position_limit=config.context_position_limit
        ),
        completion=completion,
        prompts=prompts,
        history_limit=config.history_limit,
        history_window=config.history_window,
        top_p=config.openrouter_top_p,
    )
    quick_action = QuickActionUseCase(
        completion=completion,
        prompts=prompts,
        max_tokens=config.openrouter_quick_max_tokens,
    )
    return AdvisorDispatcher(chat=chat, quick_action=quick_action)


def get_advisor_dispatcher(request: Request) -> AdvisorDispatcher:
    """Return the dispatcher built once by the application factory."""
    return request.app.state.advisor_dispatcher
