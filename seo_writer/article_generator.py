"""
Article Generation Pipeline.

Phase 1 asks the text model for the article JSON and validates it.
Phase 2 fans out the title image and the subheading images concurrently and
joins on all of them; a failed image is simply missing from the result.
"""

import asyncio
import json
import logging
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from .clients.gemini import GeminiClient
from .image_generator import ImageGenerator
from .main_schemas import ArticleContentResponse, ArticleRequest, AutoArticleContentResponse, GeneratedContent, GeneratedImages
from .seo_system import SEOPromptBuilder
from .utils import normalize_dict_keys, strip_code_fences
from .utils.matching import is_conclusion_heading

logger = logging.getLogger(__name__)

MAX_AUTO_IMAGE_SUBHEADINGS = 3
TEXT_TEMPERATURE = 0.7


class GenerationError(Exception):
    """Base class for article generation failures."""


class ArticleGenerationError(GenerationError):
    """The text model returned nothing usable."""


def select_subheadings_to_visualize(request: ArticleRequest, generated_subheadings: List[str]) -> List[str]:
    """
    Pick the subheadings that get an illustration.

    User-supplied subtitles: exactly the ones chosen by index.
    Auto mode: up to three generated subheadings, skipping the conclusion.
    """
    if request.has_user_subtitles:
        selected: List[str] = []
        for index in request.image_subtitle_indices:
            subtitle = request.subtitles[index]
            if subtitle not in selected:
                selected.append(subtitle)
        return selected

    candidates = []
    for heading in generated_subheadings:
        if not heading.strip() or is_conclusion_heading(heading) or heading in candidates:
            continue
        candidates.append(heading)
    return candidates[:MAX_AUTO_IMAGE_SUBHEADINGS]


def parse_article_response(text: Optional[str], auto_subheadings: bool = False) -> ArticleContentResponse:
    """
    Parse and validate the text model's JSON; reject rather than coerce.

    With ``auto_subheadings`` the model had to invent the subheadings, so a
    response without ``generatedSubheadings`` is rejected.
    """
    response_model = AutoArticleContentResponse if auto_subheadings else ArticleContentResponse

    if not text or not text.strip():
        raise ArticleGenerationError("No content returned from the text model")

    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise ArticleGenerationError(f"No content returned: response is not valid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ArticleGenerationError("No content returned: response is not a JSON object")

    try:
        return response_model.model_validate(normalize_dict_keys(data))
    except ValidationError as e:
        raise ArticleGenerationError(f"No content returned: response does not match the schema ({e.error_count()} errors)") from e


class ArticleGenerator:
    """Orchestrates prompt building, text generation and image fan-out."""

    def __init__(
        self,
        gemini_client: GeminiClient,
        prompt_builder: Optional[SEOPromptBuilder] = None,
        image_generator: Optional[ImageGenerator] = None,
        images_enabled: bool = True,
        max_concurrent_images: int = 0,
    ):
        self.gemini_client = gemini_client
        self.prompt_builder = prompt_builder or SEOPromptBuilder()
        self.image_generator = image_generator or ImageGenerator(gemini_client)
        self.images_enabled = images_enabled
        self.max_concurrent_images = max_concurrent_images

    async def generate(self, request: ArticleRequest) -> GeneratedContent:
        """Generate the article, its metadata and its illustrations."""
        logger.info(f"🚀 Generating article: '{request.title}' ({request.language.value}, ~{request.word_count} words)")

        parsed = await self.generate_text(request)
        logger.info(f"✅ Article text generated ({len(parsed.article_body)} chars, tags: {', '.join(parsed.tags)})")

        images = GeneratedImages()
        if self.images_enabled:
            subheadings = select_subheadings_to_visualize(request, parsed.generated_subheadings)
            images = await self.generate_images(request.title, subheadings)
        else:
            logger.info("🖼️ Skipping image generation (disabled)")

        return GeneratedContent(
            **parsed.model_dump(),
            images=images,
            original_keywords=request.keywords,
        )

    async def generate_text(self, request: ArticleRequest) -> ArticleContentResponse:
        auto_subheadings = not request.has_user_subtitles
        text = await self.gemini_client.generate_structured_output(
            prompt=self.prompt_builder.build_article_prompt(request),
            schema=self.prompt_builder.build_response_schema(auto_subheadings),
            system_instruction=self.prompt_builder.build_system_instruction(),
            temperature=TEXT_TEMPERATURE,
        )
        return parse_article_response(text, auto_subheadings=auto_subheadings)

    async def generate_images(self, title: str, subheadings: List[str]) -> GeneratedImages:
        """Request the title image and one image per subheading concurrently, waiting for all."""
        logger.info(f"🎨 Requesting {1 + len(subheadings)} images (title + {len(subheadings)} subheadings)")
        semaphore = asyncio.Semaphore(self.max_concurrent_images) if self.max_concurrent_images > 0 else None

        async def _run(key: Optional[str], coro) -> Tuple[Optional[str], Optional[str]]:
            if semaphore is None:
                return key, await coro
            async with semaphore:
                return key, await coro

        tasks = [_run(None, self.image_generator.generate_title_image(title))]
        for subheading in subheadings:
            tasks.append(_run(subheading, self.image_generator.generate_subheading_image(subheading, title)))

        results = await asyncio.gather(*tasks)

        title_image: Optional[str] = None
        subheading_images: Dict[str, str] = {}
        for key, image in results:
            if not image:
                continue
            if key is None:
                title_image = image
            else:
                subheading_images[key] = image

        logger.info(f"🖼️ Images ready: title={'yes' if title_image else 'no'}, subheadings={len(subheading_images)}/{len(subheadings)}")
        return GeneratedImages(title_image=title_image, subheading_images=subheading_images)
