"""LLM client for tool-calling chat completions using LiteLLM.

Public API:
    complete_chat: Send a conversation (and tool schemas) to the configured
        provider and return the assistant message

Example:
    >>> message = await complete_chat([{"role": "user", "content": "Hello"}])
    >>> print(message.content)
"""

from typing import Any

import litellm

from hn_newsletter.errors import LLMRequestError
from hn_newsletter.utils.config import get_settings
from hn_newsletter.utils.logging_config import get_logger


def _get_logger():
    """Get logger instance lazily to avoid module-level import issues."""
    return get_logger(__name__)


def _get_llm_config(model_override: str | None) -> dict:
    """Get LLM configuration: custom endpoint first, hosted provider otherwise.

    Args:
        model_override: Optional model id replacing LLM_DEFAULT_MODEL

    Returns:
        dict with keys model, base_url, api_key and provider
    """
    settings = get_settings()

    if settings.LLM_BASE_URL:
        return {
            "model": model_override or settings.LLM_DEFAULT_MODEL,
            "base_url": settings.LLM_BASE_URL,
            "api_key": settings.get_llm_api_key(),
            "provider": "openai",  # Custom endpoints are treated as OpenAI-compatible
        }

    return {
        "model": model_override or settings.LLM_DEFAULT_MODEL,
        "base_url": None,
        "api_key": settings.get_llm_api_key(),
        "provider": settings.LLM_PROVIDER,
    }


async def complete_chat(
    messages: list[dict[str, Any]],
    *,
    tools: list[dict[str, Any]] | None = None,
    model: str | None = None,
    temperature: float | None = None,
) -> Any:
    """Run one chat completion, optionally offering tools to the model.

    Args:
        messages: OpenAI-style conversation messages
        tools: Optional function-calling tool schemas
        model: Optional model override
        temperature: Sampling temperature (default: LLM_TEMPERATURE)

    Returns:
        The assistant message (``content`` and ``tool_calls`` attributes)

    Raises:
        ValueError: If messages is empty or temperature is out of range
        LLMRequestError: If the provider call fails

    Notes:
        - A single attempt is made; failures are not retried
        - Logs provider, model and tool count, never message content
    """
    if not messages:
        raise ValueError("Messages cannot be empty")

    settings = get_settings()
    logger = _get_logger()

    if temperature is None:
        temperature = settings.LLM_TEMPERATURE
    if not 0.0 <= temperature <= 2.0:
        raise ValueError("Temperature must be between 0.0 and 2.0")

    config = _get_llm_config(model)
    provider_name = "custom" if config["base_url"] else config["provider"]
    log_fields = {
        "provider": provider_name,
        "model": config["model"],
        "tools": len(tools) if tools else 0,
    }

    request: dict[str, Any] = {
        "model": config["model"],
        "messages": messages,
        "temperature": temperature,
        "api_key": config["api_key"],
        "base_url": config["base_url"],
        "timeout": settings.LLM_TIMEOUT,
        "custom_llm_provider": config["provider"],
    }
    if tools:
        request["tools"] = tools
        request["tool_choice"] = "auto"

    logger.debug("LLM request", extra={"extra_fields": log_fields})
    try:
        response = await litellm.acompletion(**request)
    except Exception as e:
        logger.error(
            "LLM request failed: %s: %s",
            type(e).__name__,
            str(e),
            extra={"extra_fields": {**log_fields, "error_type": type(e).__name__}},
        )
        raise LLMRequestError(
            f"LLM request failed: {type(e).__name__}: {e}",
            provider=provider_name,
            model=config["model"],
        ) from e

    logger.info("LLM request successful", extra={"extra_fields": log_fields})
    return response.choices[0].message
