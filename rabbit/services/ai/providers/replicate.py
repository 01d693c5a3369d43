"""
Replicate Provider

Image generation through Replicate's predictions API. The "Prefer: wait"
header makes Replicate hold the request open until the prediction is done,
so no polling is needed for fast models.
"""

import os
from collections.abc import Mapping

import httpx
import structlog

from rabbit.services.ai.errors import ErrorKind, ProviderError, from_exception
from rabbit.services.ai.providers.base import ImageOnlyProvider

logger = structlog.get_logger()

API_URL = "https://api.replicate.com/v1/models/{model}/predictions"
DEFAULT_MODEL = "black-forest-labs/flux-schnell"


class ReplicateProvider(ImageOnlyProvider):
    PROVIDER_NAME = "replicate"
    CREDENTIAL_ENV = "REPLICATE_API_TOKEN"

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
    ):
        self.environ = os.environ if environ is None else environ
        self.model = model
        self.timeout = timeout

    def _get_token(self) -> str:
        token = (self.environ.get(self.CREDENTIAL_ENV) or "").strip()
        if not token:
            raise ProviderError(
                f"{self.CREDENTIAL_ENV} is not configured",
                kind=ErrorKind.UNAUTHORIZED,
                provider=self.provider_name,
            )
        return token

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._get_token()}",
            "Content-Type": "application/json",
            "Prefer": "wait",
        }

    async def generate_image(self, prompt: str) -> str | None:
        logger.info("ai_generate_image_start", provider=self.provider_name, model=self.model)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    API_URL.format(model=self.model),
                    headers=self._headers(),
                    json={"input": {"prompt": prompt.strip(), "aspect_ratio": "1:1"}},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise from_exception(self.provider_name, e) from e

        prediction = response.json()
        if prediction.get("status") == "failed":
            raise ProviderError(
                prediction.get("error") or "Prediction failed",
                kind=ErrorKind.INVALID_INPUT,
                provider=self.provider_name,
            )

        output = prediction.get("output")
        if isinstance(output, list):
            output = output[0] if output else None
        if not output:
            logger.warning("ai_generate_image_empty", provider=self.provider_name, status=prediction.get("status"))
            return None

        logger.info("ai_generate_image_success", provider=self.provider_name)
        return output

    async def health_check(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.get("https://api.replicate.com/v1/account", headers=self._headers())
                response.raise_for_status()
            return True
        except (ProviderError, httpx.HTTPError) as e:
            logger.warning("ai_health_check_failed", provider=self.provider_name, error=str(e))
            return False
