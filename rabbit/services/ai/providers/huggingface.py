"""
Hugging Face Provider

Chat through the Hugging Face inference router (OpenAI-compatible) and
FLUX text-to-image through the hf-inference endpoint. Images come back as
raw bytes and are returned as a data URI.
"""

import base64

import httpx
import structlog

from rabbit.services.ai.errors import ErrorKind, ProviderError, from_exception
from rabbit.services.ai.providers.base import OpenAICompatibleProvider

logger = structlog.get_logger()

IMAGE_MODEL = "black-forest-labs/FLUX.1-schnell"
IMAGE_ENDPOINT = "https://router.huggingface.co/hf-inference/models/{model}"


class HuggingFaceProvider(OpenAICompatibleProvider):
    PROVIDER_NAME = "huggingface"
    BASE_URL = "https://router.huggingface.co/v1"
    DEFAULT_MODEL = "meta-llama/Meta-Llama-3-8B-Instruct"
    CREDENTIAL_ENV = "HUGGING_FACE_TOKEN"

    def __init__(self, *args, image_model: str = IMAGE_MODEL, **kwargs):
        super().__init__(*args, **kwargs)
        self.image_model = image_model

    async def generate_image(self, prompt: str) -> str | None:
        token = self._get_api_key()
        enhanced = f"{prompt.strip()}, high quality, professional photography"
        logger.info("ai_generate_image_start", provider=self.provider_name, model=self.image_model)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    IMAGE_ENDPOINT.format(model=self.image_model),
                    headers={"Authorization": f"Bearer {token}", "Accept": "image/png"},
                    json={"inputs": enhanced},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise from_exception(self.provider_name, e) from e

        content_type = response.headers.get("content-type", "image/png").split(";")[0]
        if not content_type.startswith("image/"):
            raise ProviderError(
                f"Unexpected response type from image model: {content_type}",
                kind=ErrorKind.UNKNOWN,
                provider=self.provider_name,
            )

        encoded = base64.b64encode(response.content).decode("ascii")
        logger.info("ai_generate_image_success", provider=self.provider_name, size=len(response.content))
        return f"data:{content_type};base64,{encoded}"
