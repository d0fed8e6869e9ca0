from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class Language(str, Enum):
    INDONESIA = "Bahasa Indonesia"
    ENGLISH = "English"


class WritingStyle(str, Enum):
    INFORMATIONAL = "Informational"
    EDUCATIONAL = "Educational"
    TRANSACTIONAL = "Transactional"


class ArticleGoal(str, Enum):
    REVIEW = "Review"
    TIPS = "Tips"
    INFORMATION = "Information"
    SELLING = "Selling"
    COMPARISON = "Comparison"
    RECOMMENDATION = "Recommendation"


# Localized heading of the final section, per language.
CONCLUSION_HEADINGS: Dict[Language, str] = {
    Language.ENGLISH: "Conclusion",
    Language.INDONESIA: "Kesimpulan",
}

MAX_TITLE_LENGTH = 60
MIN_WORD_COUNT = 100
MAX_WORD_COUNT = 5000


class ArticleRequest(BaseModel):
    """A validated, submission-ready article brief."""

    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH, description="Article title (max 60 chars)")
    language: Language = Language.INDONESIA
    keywords: str = Field(description="Comma-separated primary keywords")
    word_count: int = Field(default=500, ge=MIN_WORD_COUNT, le=MAX_WORD_COUNT)
    style: WritingStyle = WritingStyle.INFORMATIONAL
    goal: ArticleGoal = ArticleGoal.INFORMATION
    brand: str = ""
    subtitles: List[str] = Field(default_factory=list, description="Non-blank subheadings to use verbatim")
    image_subtitle_indices: List[int] = Field(default_factory=list, description="Indices into subtitles that get an image")
    additional_instructions: str = ""

    @field_validator("keywords")
    @classmethod
    def _require_keyword(cls, value: str) -> str:
        if not any(term.strip() for term in value.split(",")):
            raise ValueError("at least one keyword is required")
        return value

    @field_validator("subtitles")
    @classmethod
    def _reject_blank_subtitles(cls, value: List[str]) -> List[str]:
        if any(not s.strip() for s in value):
            raise ValueError("subtitles must not contain blank entries")
        return value

    @model_validator(mode="after")
    def _check_image_indices(self) -> "ArticleRequest":
        for index in self.image_subtitle_indices:
            if index < 0 or index >= len(self.subtitles):
                raise ValueError(f"image subtitle index {index} is out of range")
        return self

    @property
    def has_user_subtitles(self) -> bool:
        return len(self.subtitles) > 0

    @property
    def conclusion_heading(self) -> str:
        return CONCLUSION_HEADINGS[self.language]


class ArticleBrief(BaseModel):
    """Raw form state, including the blank subtitle slots of the editor.

    Indices in ``image_subtitle_indices`` point into the raw ``subtitles`` list,
    blanks included. :meth:`to_request` drops the blanks and re-points the
    indices at the filtered list.
    """

    title: str = ""
    language: Language = Language.INDONESIA
    keywords: str = ""
    word_count: int = 500
    style: WritingStyle = WritingStyle.INFORMATIONAL
    goal: ArticleGoal = ArticleGoal.INFORMATION
    brand: str = ""
    subtitles: List[str] = Field(default_factory=lambda: ["", "", ""])
    image_subtitle_indices: List[int] = Field(default_factory=list)
    additional_instructions: str = ""

    @field_validator("subtitles")
    @classmethod
    def _keep_one_slot(cls, value: List[str]) -> List[str]:
        return value or [""]

    def with_subtitle(self, index: int, value: str) -> "ArticleBrief":
        """Set a subtitle slot; filling the last slot appends a fresh blank one."""
        subtitles = list(self.subtitles)
        subtitles[index] = value
        if index == len(subtitles) - 1 and value.strip():
            subtitles.append("")
        return self.model_copy(update={"subtitles": subtitles})

    def remove_subtitle(self, index: int) -> "ArticleBrief":
        if len(self.subtitles) <= 1:
            return self
        subtitles = [s for i, s in enumerate(self.subtitles) if i != index]
        indices = []
        for i in self.image_subtitle_indices:
            if i == index:
                continue
            indices.append(i - 1 if i > index else i)
        return self.model_copy(update={"subtitles": subtitles, "image_subtitle_indices": indices})

    def to_request(self) -> ArticleRequest:
        """Filter blank subtitles and build a validated ArticleRequest."""
        remap: Dict[int, int] = {}
        subtitles: List[str] = []
        for raw_index, subtitle in enumerate(self.subtitles):
            if subtitle.strip():
                remap[raw_index] = len(subtitles)
                subtitles.append(subtitle.strip())

        indices: List[int] = []
        for raw_index in self.image_subtitle_indices:
            mapped = remap.get(raw_index)
            if mapped is not None and mapped not in indices:
                indices.append(mapped)

        return ArticleRequest(
            title=self.title.strip(),
            language=self.language,
            keywords=self.keywords,
            word_count=self.word_count,
            style=self.style,
            goal=self.goal,
            brand=self.brand.strip(),
            subtitles=subtitles,
            image_subtitle_indices=indices,
            additional_instructions=self.additional_instructions.strip(),
        )


class ArticleContentResponse(BaseModel):
    """The JSON document returned by the text model, after key normalization."""

    article_body: str = Field(min_length=1, description="The article formatted in Markdown")
    meta_description: str = Field(description="SEO meta description (115-125 chars)")
    tags: List[str] = Field(min_length=3, max_length=3, description="Exactly 3 recommended SEO tags")
    generated_subheadings: List[str] = Field(default_factory=list, description="H2 subheadings as they appear in the body")


class AutoArticleContentResponse(ArticleContentResponse):
    """Response when the model invented the subheadings; the list is then mandatory."""

    generated_subheadings: List[str] = Field(description="H2 subheadings as they appear in the body")


class GeneratedImages(BaseModel):
    title_image: Optional[str] = Field(default=None, description="Data URI of the title image")
    subheading_images: Dict[str, str] = Field(default_factory=dict, description="Subheading text -> data URI")


class GeneratedContent(ArticleContentResponse):
    images: GeneratedImages = Field(default_factory=GeneratedImages)
    original_keywords: str = Field(description="Keyword string of the request, for density analysis")
