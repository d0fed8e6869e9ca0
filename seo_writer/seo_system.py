"""
SEO Prompt System for seo-writer.

This module provides:
- The fixed E-E-A-T writer system instruction
- Per-request article prompts built from an ArticleRequest
- The strict JSON response schema the text model must follow
"""

import logging
from typing import Dict, List

from .main_schemas import ArticleRequest, Language

logger = logging.getLogger(__name__)

AUTO_SUBHEADING_DIRECTIVE = "- Auto-generate at least 3 relevant subheadings that cover the topic comprehensively."

# JSON keys requested from the model. Normalized to snake_case on the way back.
FIELD_ARTICLE_BODY = "articleBody"
FIELD_META_DESCRIPTION = "metaDescription"
FIELD_TAGS = "tags"
FIELD_GENERATED_SUBHEADINGS = "generatedSubheadings"

TAG_COUNT = 3


class SEOPromptBuilder:
    """Builds SEO-optimized prompts and the response contract for article generation."""

    def __init__(self, allow_bold: bool = False):
        self.allow_bold = allow_bold

    def build_system_instruction(self) -> str:
        if self.allow_bold:
            emphasis_rule = "- **Bold Text:** Use bold formatting (**text**) sparingly, only for key terms a reader should not miss."
        else:
            emphasis_rule = "- **NO BOLD TEXT:** Do NOT use bold formatting (**text**) anywhere in the paragraphs or lists. Only use headers (##) for structure."

        return f"""
You are a world-class SEO Content Writer and Copywriter with deep expertise in E-E-A-T (Experience, Expertise, Authoritativeness, Trustworthiness) principles.

Your task is to write articles that are:
1. 100% Unique and Human-written (avoid robotic patterns).
2. Highly readable (use simple language suitable for laypeople).
3. Optimized for SEO.

STRICT WRITING RULES:
{emphasis_rule}
- **Sentence Length:** Keep sentences short. Do not exceed 20 words per sentence.
- **Transition Words:** Use transition words frequently (aim for 1 per sentence/clause) to ensure smooth flow.
- **Passive Voice:** Use passive voice moderately to sound objective, but balance with active voice.
- **Semantic Keywords:** Naturally integrate semantic keywords related to the main topic.
- **Structure:** Use clear Markdown formatting (## for H2, ### for H3, bullet points).
- **Value:** The content must be actionable, helpful, and provide specific value to the reader.

META DESCRIPTION RULE:
- Create a compelling meta description between 115 and 125 characters.
- Include the main keyword.
"""

    def build_subheading_instruction(self, request: ArticleRequest) -> str:
        if request.has_user_subtitles:
            return "\n".join(f"- {subtitle}" for subtitle in request.subtitles)
        return AUTO_SUBHEADING_DIRECTIVE

    def build_article_prompt(self, request: ArticleRequest) -> str:
        """
        Build the per-request article prompt.

        Args:
            request: The validated article request

        Returns:
            Prompt string embedding every request field and the structural rules
        """
        conclusion = request.conclusion_heading
        subheading_instruction = self.build_subheading_instruction(request)

        if request.has_user_subtitles:
            subheading_rule = (
                "Use the subheadings provided above exactly as written, as Header 2 (##) "
                "or Header 3 (###) in Markdown. Do not rename or reorder them."
            )
        else:
            subheading_rule = (
                f"Invent the subheadings yourself and list every H2 subheading, exactly as it "
                f"appears in the markdown, in the {FIELD_GENERATED_SUBHEADINGS} field."
            )

        additional = request.additional_instructions or "None."

        prompt = f"""
Generate a complete SEO article based on the following specifications:

- **Title:** {request.title}
- **Language:** {request.language.value}
- **Primary Keywords:** {request.keywords}
- **Target Length:** Approximately {request.word_count} words
- **Writing Style:** {request.style.value}
- **Article Goal:** {request.goal.value}
- **Brand/Product Name:** {request.brand}
- **Structure/Subheadings:**
{subheading_instruction}

**CRITICAL STRUCTURAL REQUIREMENTS:**
1. **Introduction:** The very first paragraph MUST be an introduction that naturally includes the primary keywords ({request.keywords}).
2. **Brand Recommendation:** You MUST include a dedicated paragraph recommending the brand/product '{request.brand}' immediately *before* the {conclusion} section. Make this natural but persuasive.
3. **{conclusion}:** The FINAL section of the article must be a Header 2 (##) titled "{conclusion}".
4. **User Custom Instructions:** Follow these additional instructions from the user: "{additional}"
5. **Subheadings:** {subheading_rule}

Please output the result in JSON format containing the article body (markdown), meta description, {TAG_COUNT} tags{", and generatedSubheadings" if not request.has_user_subtitles else ""}.
"""
        if request.language == Language.INDONESIA:
            prompt += "\nWrite the whole article, meta description and tags in Bahasa Indonesia. Keep the JSON keys in English.\n"

        logger.debug(f"Built article prompt ({len(prompt)} chars, auto subheadings: {not request.has_user_subtitles})")
        return prompt

    def build_response_schema(self, auto_subheadings: bool) -> Dict:
        """JSON schema the text model response must conform to."""
        properties: Dict[str, Dict] = {
            FIELD_ARTICLE_BODY: {
                "type": "string",
                "description": "The main content of the article formatted in Markdown. Use headers (##) and lists.",
            },
            FIELD_META_DESCRIPTION: {
                "type": "string",
                "description": "An SEO-optimized meta description between 115-125 characters.",
                "maxLength": 160,
            },
            FIELD_TAGS: {
                "type": "array",
                "items": {"type": "string"},
                "minItems": TAG_COUNT,
                "maxItems": TAG_COUNT,
                "description": f"{TAG_COUNT} recommended SEO tags.",
            },
        }
        if not self.allow_bold:
            properties[FIELD_ARTICLE_BODY]["description"] += " Do NOT use bold text."

        if auto_subheadings:
            properties[FIELD_GENERATED_SUBHEADINGS] = {
                "type": "array",
                "items": {"type": "string"},
                "description": "A list of the H2 subheadings used in the article body. Return this exactly as they appear in the markdown.",
            }

        required: List[str] = list(properties.keys())
        return {
            "type": "object",
            "properties": properties,
            "required": required,
            "additionalProperties": False,
        }
