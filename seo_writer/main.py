"""
SEO Writer - Article brief to AI-generated article.
Key Features: Bilingual (ID/EN), structured Gemini output, parallel image generation,
keyword density and E-E-A-T analysis, HTML/Markdown export.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .analyzer import analyze_keyword_density, calculate_eeat_score, meta_description_status
from .article_generator import ArticleGenerator, GenerationError
from .clients.gemini import GeminiClient, ConfigurationError, DEFAULT_TEXT_MODEL, DEFAULT_IMAGE_MODEL
from .image_generator import ImageGenerator
from .main_schemas import ArticleBrief, ArticleGoal, ArticleRequest, GeneratedContent, Language, WritingStyle
from .renderer import ArticleRenderer, build_copy_text
from .seo_system import SEOPromptBuilder

# Load env
load_dotenv(override=True)

# Set up logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- CONFIGURATION ---
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
OPENROUTER_API_KEY = os.environ.get("OPENROUTER_API_KEY")
GEMINI_TEXT_MODEL = os.environ.get("GEMINI_TEXT_MODEL", DEFAULT_TEXT_MODEL)
GEMINI_IMAGE_MODEL = os.environ.get("GEMINI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL)
GEMINI_MAX_ATTEMPTS = int(os.environ.get("GEMINI_MAX_ATTEMPTS", "1"))
IMAGE_GENERATION_ENABLED = os.environ.get("IMAGE_GENERATION_ENABLED", "true").lower() == "true"
MAX_CONCURRENT_IMAGES = int(os.environ.get("MAX_CONCURRENT_IMAGES", "0"))
ALLOW_BOLD_TEXT = os.environ.get("ALLOW_BOLD_TEXT", "false").lower() == "true"
OUTPUT_DIR = os.environ.get("OUTPUT_DIR", "output")

USER_ERROR_MESSAGE = "Failed to generate article. Please check your API key and try again."


# --- INITIALIZATION ---
def initialize_system() -> Dict:
    """Initialize the client and the pipeline components."""
    if not (GEMINI_API_KEY or OPENROUTER_API_KEY):
        logger.error("Missing GEMINI_API_KEY (or OPENROUTER_API_KEY).")
        return {}

    gemini_client = GeminiClient(
        api_key=GEMINI_API_KEY,
        openrouter_api_key=OPENROUTER_API_KEY,
        text_model=GEMINI_TEXT_MODEL,
        image_model=GEMINI_IMAGE_MODEL,
        max_attempts=GEMINI_MAX_ATTEMPTS,
    )
    seo_builder = SEOPromptBuilder(allow_bold=ALLOW_BOLD_TEXT)

    if IMAGE_GENERATION_ENABLED:
        logger.info("🖼️ Image generation enabled")
    else:
        logger.info("🖼️ Image generation disabled (text only)")

    generator = ArticleGenerator(
        gemini_client,
        prompt_builder=seo_builder,
        image_generator=ImageGenerator(gemini_client),
        images_enabled=IMAGE_GENERATION_ENABLED,
        max_concurrent_images=MAX_CONCURRENT_IMAGES,
    )

    return {
        "gemini": gemini_client,
        "seo": seo_builder,
        "generator": generator,
        "renderer": ArticleRenderer(),
    }


# --- BRIEF ---
def load_brief(path: str) -> ArticleBrief:
    """Load an article brief from a JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        return ArticleBrief.model_validate(json.load(f))


def brief_from_args(args: argparse.Namespace) -> ArticleBrief:
    """Build the brief from a JSON file and/or command line flags (flags win)."""
    brief = load_brief(args.brief) if args.brief else ArticleBrief()

    updates = {}
    for field in ("title", "keywords", "brand", "word_count", "additional_instructions"):
        value = getattr(args, field)
        if value is not None:
            updates[field] = value
    if args.language:
        updates["language"] = Language(args.language)
    if args.style:
        updates["style"] = WritingStyle(args.style)
    if args.goal:
        updates["goal"] = ArticleGoal(args.goal)
    if args.subtitle:
        updates["subtitles"] = list(args.subtitle)
    if args.image_subtitle:
        updates["image_subtitle_indices"] = list(args.image_subtitle)

    return brief.model_copy(update=updates)


# --- OUTPUT ---
def write_outputs(content: GeneratedContent, request: ArticleRequest, renderer: ArticleRenderer,
                  output_dir: str, highlight: bool = False) -> Path:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    (out / "article.md").write_text(build_copy_text(content), encoding="utf-8")
    (out / "article.html").write_text(
        renderer.render_document(content, title=request.title, highlight=highlight), encoding="utf-8"
    )
    (out / "result.json").write_text(content.model_dump_json(indent=2), encoding="utf-8")

    logger.info(f"💾 Results written to: {out}")
    return out


def log_analysis(content: GeneratedContent):
    for item in analyze_keyword_density(content.article_body, content.original_keywords):
        logger.info(f"🔑 {item.keyword}: {item.count}x, {item.density_label} ({item.status})")
    logger.info(f"📊 E-E-A-T score: {calculate_eeat_score(content.article_body)}/100")
    meta_len = len(content.meta_description)
    logger.info(f"📝 Meta description: {meta_len} chars ({meta_description_status(content.meta_description)})")


# --- PROCESSES ---
async def run_article_generation(components: Dict, request: ArticleRequest) -> GeneratedContent:
    """Execution flow for generating one article."""
    generator: ArticleGenerator = components["generator"]
    content = await generator.generate(request)
    log_analysis(content)
    return content


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate an SEO article with Gemini from an article brief")
    parser.add_argument("--brief", help="Path to an article brief JSON file")
    parser.add_argument("--title", help="Article title (max 60 chars)")
    parser.add_argument("--keywords", help="Comma-separated primary keywords")
    parser.add_argument("--word-count", dest="word_count", type=int, help="Target length (100-5000 words)")
    parser.add_argument("--language", choices=[l.value for l in Language])
    parser.add_argument("--style", choices=[s.value for s in WritingStyle])
    parser.add_argument("--goal", choices=[g.value for g in ArticleGoal])
    parser.add_argument("--brand", help="Brand/product to recommend before the conclusion")
    parser.add_argument("--subtitle", action="append", help="Subheading to use verbatim (repeatable)")
    parser.add_argument("--image-subtitle", dest="image_subtitle", action="append", type=int,
                        help="Index of a --subtitle that gets an image (repeatable)")
    parser.add_argument("--instructions", dest="additional_instructions", help="Additional instructions for the writer")
    parser.add_argument("--output-dir", default=OUTPUT_DIR, help=f"Where results are written (default: {OUTPUT_DIR})")
    parser.add_argument("--highlight", action="store_true", help="Highlight keywords in the HTML output")
    parser.add_argument("--json", action="store_true", help="Print the result JSON to stdout")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        request = brief_from_args(args).to_request()
    except (ValidationError, ValueError, OSError) as e:
        logger.error(f"❌ Invalid article brief: {e}")
        return 2

    system = initialize_system()
    if not system:
        logger.error("System initialization failed. Please check your environment variables.")
        return 1

    try:
        content = asyncio.run(run_article_generation(system, request))
    except (GenerationError, ConfigurationError) as e:
        logger.error(f"❌ Content generation error: {e}")
        print(USER_ERROR_MESSAGE, file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception(f"❌ Unexpected error while generating article: {e}")
        print(USER_ERROR_MESSAGE, file=sys.stderr)
        return 1

    write_outputs(content, request, system["renderer"], args.output_dir, highlight=args.highlight)
    if args.json:
        print(content.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
