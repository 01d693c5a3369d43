"""
AI Router

Routes content, chat and image requests to the active provider and walks a
fallback list when that provider is unavailable.

    Selecting -> Invoking -> Success
                     |
                     +-> (retry same provider per RetryPolicy) -> Invoking
                     +-> (fallback-eligible failure) -> next fallback -> Invoking
                     +-> Failed (AllProvidersFailedError)

No state survives between calls: the active provider is recomputed from the
environment every time.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import structlog

from rabbit.core.logging import enrich_event
from rabbit.services.ai import prompts
from rabbit.services.ai.config import MOCK_PROVIDER, ProviderInfo, RouterConfig
from rabbit.services.ai.errors import AllProvidersFailedError, ErrorKind, ProviderError
from rabbit.services.ai.interface import ContentProvider
from rabbit.services.ai.registry import ProviderRegistry
from rabbit.services.ai.retry import RetryPolicy
from rabbit.services.ai.schemas import (
    ChatRequest,
    ContentRequest,
    GenerationResult,
    RoutedResult,
)

logger = structlog.get_logger()

T = TypeVar("T")

ProviderCall = Callable[[ContentProvider], Awaitable[T]]


class AIRouter:
    """Provider selection plus retry and fallback for every AI operation."""

    def __init__(
        self,
        config: RouterConfig,
        registry: ProviderRegistry,
        retry_policy: RetryPolicy | None = None,
    ):
        self.config = config
        self.registry = registry
        self.retry_policy = retry_policy or RetryPolicy()

    def current_provider(self) -> ProviderInfo:
        """Catalogue entry of the provider the next call would use."""
        return self.config.active_provider_info()

    async def _invoke(self, name: str, call: ProviderCall[T]) -> T:
        adapter = self.registry.get(name)
        return await self.retry_policy.run(call, adapter)

    def _record(
        self,
        operation: str,
        result: RoutedResult,
    ) -> None:
        enrich_event(**{
            "ai.operation": operation,
            "ai.provider": result.provider,
            "ai.fallback_used": result.fallback_used,
            "ai.failed_attempts": len(result.attempts),
        })

    async def _route(
        self,
        operation: str,
        fallback_order: Sequence[str],
        call: ProviderCall[T],
    ) -> RoutedResult[T]:
        """Call the active provider, then walk `fallback_order` if allowed.

        Raises:
            UnknownProviderError: a provider name has no adapter
            AllProvidersFailedError: nothing could serve the request
        """
        primary = self.config.active_provider()
        # Unknown names are fatal before any call is made
        self.registry.get(primary)
        logger.info("ai_provider_selected", operation=operation, provider=primary)

        attempts: list[tuple[str, ErrorKind]] = []
        try:
            value = await self._invoke(primary, call)
            result = RoutedResult(value=value, provider=primary)
            self._record(operation, result)
            return result
        except ProviderError as e:
            attempts.append((primary, e.kind))
            last_error = e
            logger.warning(
                "ai_provider_failed",
                operation=operation,
                provider=primary,
                kind=e.kind.value,
                status_code=e.status_code,
                error=e.message,
            )
            if primary == MOCK_PROVIDER or not e.is_fallback_eligible:
                raise AllProvidersFailedError(operation, e, attempts) from e

        for name in fallback_order:
            if name == primary:
                continue
            if not self.config.is_configured(name):
                logger.debug("ai_fallback_skipped", operation=operation, provider=name, reason="not_configured")
                continue

            logger.info("ai_fallback_attempt", operation=operation, provider=name, after=last_error.kind.value)
            try:
                value = await self._invoke(name, call)
            except ProviderError as e:
                attempts.append((name, e.kind))
                last_error = e
                logger.warning(
                    "ai_fallback_failed",
                    operation=operation,
                    provider=name,
                    kind=e.kind.value,
                    error=e.message,
                )
                if not e.is_fallback_eligible:
                    break
                continue

            result = RoutedResult(value=value, provider=name, fallback_used=True, attempts=attempts)
            self._record(operation, result)
            logger.info("ai_fallback_success", operation=operation, provider=name, failed_attempts=len(attempts))
            return result

        raise AllProvidersFailedError(operation, last_error, attempts) from last_error

    async def route_content(self, request: ContentRequest) -> RoutedResult[GenerationResult]:
        return await self._route(
            "content",
            self.config.content_fallback_providers,
            lambda adapter: adapter.generate_multi_platform_content(request),
        )

    async def route_chat(self, request: ChatRequest) -> RoutedResult[GenerationResult]:
        return await self._route(
            "chat",
            self.config.chat_fallback_providers,
            lambda adapter: adapter.generate_chat_response(request),
        )

    async def route_image(self, prompt: str) -> RoutedResult[str]:
        """Try image providers in their dedicated order.

        Unconfigured providers are skipped, a provider returning None hands
        over to the next one, and any provider error does the same.

        Raises:
            AllProvidersFailedError: every image provider failed
        """
        order = [MOCK_PROVIDER] if self.config.mock_forced else list(self.config.image_providers)
        attempts: list[tuple[str, ErrorKind]] = []
        last_error: ProviderError | None = None

        for name in order:
            adapter = self.registry.get(name)
            if not self.config.is_configured(name):
                logger.info("ai_image_provider_skipped", provider=name, reason="not_configured")
                continue

            try:
                url = await self.retry_policy.run(adapter.generate_image, prompt)
            except ProviderError as e:
                attempts.append((name, e.kind))
                last_error = e
                logger.warning("ai_image_provider_failed", provider=name, kind=e.kind.value, error=e.message)
                continue

            if not url:
                logger.info("ai_image_provider_empty", provider=name)
                continue

            result = RoutedResult(value=url, provider=name, fallback_used=bool(attempts), attempts=attempts)
            self._record("image", result)
            return result

        logger.error("ai_image_all_providers_failed", attempts=len(attempts))
        raise AllProvidersFailedError("image", last_error, attempts)

    @staticmethod
    def degraded_result(request: ContentRequest, error: AllProvidersFailedError) -> GenerationResult:
        """Labelled placeholder answer for chat and content on total failure."""
        message = error.last_error.message if error.last_error else str(error)
        enrich_event(**{"ai.degraded": True})
        return prompts.degraded_result(request, message)
