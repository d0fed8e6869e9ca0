import base64
import logging
import os
from typing import Any, Dict, Optional

import httpx
from google import genai
from google.genai import types
from google.genai.errors import APIError
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential, retry_if_exception_type

logger = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"

# OpenRouter Model Mapping
OPENROUTER_MODEL_MAP = {
    "gemini-2.5-flash": "google/gemini-2.5-flash",
    "gemini-2.5-pro": "google/gemini-2.5-pro",
    "gemini-2.0-flash": "google/gemini-2.0-flash-001",
    "gemini-2.5-flash-image": "google/gemini-2.5-flash-image-preview",
    "gemini-3-pro-image": "google/gemini-3-pro-image-preview",
}


class ConfigurationError(RuntimeError):
    """Raised when the client is used without any usable credentials."""


class GeminiClient:
    """Client for the hosted text and image generation endpoints.

    Supports:
    - Google AI API (API key) through the google-genai async client
    - OpenRouter API (alternative backend) over httpx

    Built explicitly from configuration and passed to whichever component
    issues requests, so tests can hand in a double instead.
    """

    OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

    def __init__(
        self,
        api_key: Optional[str] = None,
        openrouter_api_key: Optional[str] = None,
        text_model: str = DEFAULT_TEXT_MODEL,
        image_model: str = DEFAULT_IMAGE_MODEL,
        max_attempts: int = 1,
        timeout: float = 120.0,
    ):
        self.api_key = api_key
        self.openrouter_api_key = openrouter_api_key
        self.text_model = text_model
        self.image_model = image_model
        self.max_attempts = max(1, max_attempts)
        self.timeout = timeout
        self._using_openrouter = False
        self.client = self._initialize_client()

    def _initialize_client(self) -> Optional[genai.Client]:
        """Initialize the GenAI client with preferred authentication.

        Priority:
        1. OpenRouter (if an OpenRouter key is given)
        2. Google AI API (if a Gemini API key is given)
        """
        if self.openrouter_api_key:
            logger.info("Initializing Gemini with OpenRouter backend")
            self._using_openrouter = True
            return None

        if self.api_key:
            logger.info("Initializing Gemini with API key")
            return genai.Client(api_key=self.api_key)

        logger.error("No valid Gemini credentials found")
        return None

    def is_using_openrouter(self) -> bool:
        """Check if the client is using OpenRouter backend."""
        return self._using_openrouter

    def _map_model_to_openrouter(self, model: str) -> str:
        """Map a Gemini model name to its OpenRouter equivalent."""
        return OPENROUTER_MODEL_MAP.get(model, f"google/{model}")

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=2, min=4, max=60),
            retry=retry_if_exception_type((APIError, httpx.HTTPStatusError)),
            reraise=True,
        )

    def _openrouter_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.openrouter_api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": os.environ.get("SITE_URL", "https://example.com"),
            "X-Title": os.environ.get("SITE_NAME", "SEO Writer"),
        }

    async def _post_openrouter(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as http_client:
            response = await http_client.post(
                f"{self.OPENROUTER_BASE_URL}/chat/completions",
                headers=self._openrouter_headers(),
                json=payload,
            )
            response.raise_for_status()
            return response.json()

    async def generate_content(self, model: str, contents: Any, config: Optional[types.GenerateContentConfig] = None) -> Any:
        """Call the Gemini API, retrying API errors up to ``max_attempts`` times."""
        if not self.client:
            raise ConfigurationError("Gemini client not initialized")

        async for attempt in self._retrying():
            with attempt:
                logger.info(f"Calling Gemini API (Model: {model})")
                return await self.client.aio.models.generate_content(
                    model=model,
                    contents=contents,
                    config=config,
                )

    async def generate_structured_output(
        self,
        prompt: str,
        schema: Dict,
        system_instruction: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Generate a JSON document conforming to ``schema``; returns the raw text ('' if empty)."""
        if self._using_openrouter:
            return await self._generate_openrouter_structured(prompt, schema, system_instruction, temperature)

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
            response_json_schema=schema,
            temperature=temperature,
        )
        contents = [types.Content(role="user", parts=[types.Part(text=prompt)])]
        response = await self.generate_content(self.text_model, contents, config)
        return (response.text if response else None) or ""

    async def _generate_openrouter_structured(
        self,
        prompt: str,
        schema: Dict,
        system_instruction: Optional[str],
        temperature: float,
    ) -> str:
        openrouter_model = self._map_model_to_openrouter(self.text_model)
        logger.info(f"Calling OpenRouter API (Model: {openrouter_model})")

        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": openrouter_model,
            "messages": messages,
            "temperature": temperature,
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": "response_schema",
                    "strict": True,
                    "schema": schema,
                },
            },
        }

        async for attempt in self._retrying():
            with attempt:
                data = await self._post_openrouter(payload)

        choices = data.get("choices") or [{}]
        content = choices[0].get("message", {}).get("content")
        return content if isinstance(content, str) else ""

    async def generate_image(self, prompt: str, aspect_ratio: str = "16:9") -> Optional[str]:
        """Generate one image and return it as a data URI.

        Returns None when the response carries no image data. API and
        transport errors propagate.
        """
        if self._using_openrouter:
            return await self._generate_openrouter_image(prompt, aspect_ratio)

        config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
        )
        contents = [types.Content(role="user", parts=[types.Part(text=prompt)])]
        response = await self.generate_content(self.image_model, contents, config)

        candidates = response.candidates if response and response.candidates else []
        for candidate in candidates:
            if not candidate.content or not candidate.content.parts:
                continue
            for part in candidate.content.parts:
                if part.inline_data and part.inline_data.data:
                    mime_type = part.inline_data.mime_type or "image/png"
                    encoded = base64.b64encode(part.inline_data.data).decode("ascii")
                    return f"data:{mime_type};base64,{encoded}"
        return None

    async def _generate_openrouter_image(self, prompt: str, aspect_ratio: str) -> Optional[str]:
        openrouter_model = self._map_model_to_openrouter(self.image_model)
        logger.info(f"🎨 Generating image via OpenRouter (Model: {openrouter_model})")

        payload = {
            "model": openrouter_model,
            "messages": [{"role": "user", "content": prompt}],
            "modalities": ["image", "text"],
            "image_config": {"aspect_ratio": aspect_ratio},
        }

        async for attempt in self._retrying():
            with attempt:
                data = await self._post_openrouter(payload)

        choices = data.get("choices") or []
        if not choices:
            logger.warning("No choices in OpenRouter image response")
            return None

        message = choices[0].get("message", {})
        for image_item in message.get("images") or []:
            if isinstance(image_item, dict):
                url = image_item.get("image_url", {}).get("url", "")
            else:
                url = str(image_item)
            if url.startswith("data:image"):
                return url
            if url:
                return f"data:image/png;base64,{url}"

        content = message.get("content")
        if isinstance(content, str) and content.startswith("data:image"):
            return content

        logger.warning(f"OpenRouter returned no image data: {str(content)[:200] if content else 'empty'}")
        return None
