"""
Image Generator Module.
Builds illustration prompts and calls the hosted image model, turning any
failure into "no image" so one bad call never sinks an article.
"""

import logging
from typing import Optional

from .clients.gemini import GeminiClient

logger = logging.getLogger(__name__)

DEFAULT_ASPECT_RATIO = "16:9"


def build_title_image_prompt(title: str) -> str:
    return (
        f'Photorealistic, cinematic lighting, 16:9 aspect ratio, high quality, 4k image representing the concept: "{title}". '
        "Style: Professional, Editorial. No text, no typography, clean image."
    )


def build_subheading_image_prompt(subheading: str, title: str) -> str:
    return (
        f'Illustration or photo representing: "{subheading}". Context: {title}. '
        "Cinematic lighting, 16:9 aspect ratio, High quality, 4k. No text, no typography, clean image."
    )


class ImageGenerator:
    """Generate article illustrations using the Gemini image model."""

    def __init__(self, gemini_client: GeminiClient, aspect_ratio: str = DEFAULT_ASPECT_RATIO):
        self.gemini_client = gemini_client
        self.aspect_ratio = aspect_ratio

    async def generate_image(self, prompt: str) -> Optional[str]:
        """Return a data URI, or None when the call fails or yields no image."""
        try:
            image = await self.gemini_client.generate_image(prompt, aspect_ratio=self.aspect_ratio)
        except Exception as e:
            logger.warning(f"⚠️ Image generation failed: {e}")
            return None

        if not image:
            logger.warning(f"⚠️ No image data returned for prompt: {prompt[:60]}...")
            return None
        return image

    async def generate_title_image(self, title: str) -> Optional[str]:
        return await self.generate_image(build_title_image_prompt(title))

    async def generate_subheading_image(self, subheading: str, title: str) -> Optional[str]:
        return await self.generate_image(build_subheading_image_prompt(subheading, title))
