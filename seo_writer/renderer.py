"""
Article Renderer: turns GeneratedContent into publishable output.

- Markdown body → HTML (python-markdown)
- Title image before the body, subheading images right after their heading
- Optional highlighting of keyword occurrences in body text
- A standalone HTML document with metadata and the SEO analysis
- The plain "copy all" text
"""

import html
import logging
from typing import List, Optional

import markdown as md
from bs4 import BeautifulSoup, NavigableString

from .analyzer import (
    analyze_keyword_density,
    calculate_eeat_score,
    keywords_pattern,
    meta_description_status,
    parse_keywords,
    META_DESCRIPTION_MIN,
    META_DESCRIPTION_MAX,
)
from .main_schemas import GeneratedContent
from .utils.matching import find_heading_key

logger = logging.getLogger(__name__)

HIGHLIGHT_CLASS = "keyword-highlight"
# Text inside these tags is never highlighted.
SKIP_HIGHLIGHT_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6", "code", "pre", "a", "mark", "script", "style"}


def build_copy_text(content: GeneratedContent) -> str:
    """The text placed on the clipboard by "Copy All"."""
    return (
        f"{content.article_body}\n"
        "\n"
        "---\n"
        "Meta Description:\n"
        f"{content.meta_description}\n"
        "\n"
        "Tags:\n"
        f"{', '.join(content.tags)}\n"
    )


def highlight_keywords(soup: BeautifulSoup, keywords: List[str]) -> int:
    """Wrap standalone keyword occurrences in <mark>; returns the number of marks added."""
    if not keywords:
        return 0

    pattern = keywords_pattern(keywords)

    marks = 0
    for node in list(soup.find_all(string=True)):
        if not isinstance(node, NavigableString) or not node.strip():
            continue
        if any(parent.name in SKIP_HIGHLIGHT_TAGS for parent in node.parents):
            continue

        text = str(node)
        pieces = []
        last = 0
        for match in pattern.finditer(text):
            if match.start() > last:
                pieces.append(NavigableString(text[last:match.start()]))
            mark = soup.new_tag("mark", attrs={"class": HIGHLIGHT_CLASS})
            mark.string = match.group(0)
            pieces.append(mark)
            last = match.end()
            marks += 1

        if not pieces:
            continue
        if last < len(text):
            pieces.append(NavigableString(text[last:]))
        for piece in pieces:
            node.insert_before(piece)
        node.extract()

    return marks


class ArticleRenderer:
    """Renders generated articles to HTML."""

    def __init__(self, allow_partial_match: bool = False):
        self.allow_partial_match = allow_partial_match

    def _image_tag(self, soup: BeautifulSoup, src: str, alt: str, css_class: str):
        figure = soup.new_tag("figure", attrs={"class": css_class})
        figure.append(soup.new_tag("img", attrs={"src": src, "alt": alt, "loading": "lazy"}))
        return figure

    def render_html(self, content: GeneratedContent, highlight: bool = False, title: Optional[str] = None) -> str:
        """
        Render the article body as an HTML fragment.

        Args:
            content: Generated article
            highlight: Mark keyword occurrences in body text
            title: Alt text for the title image

        Returns:
            HTML fragment string
        """
        body_html = md.markdown(content.article_body, extensions=["extra", "sane_lists"])
        soup = BeautifulSoup(body_html, "html.parser")

        images = content.images.subheading_images
        # Each image is attached once, under the first heading that resolves to it.
        matched_keys = set()
        for heading in soup.find_all(["h2", "h3"]):
            heading_text = heading.get_text(" ", strip=True)
            key = find_heading_key(heading_text, images, self.allow_partial_match)
            if key is None or key in matched_keys:
                continue
            heading.insert_after(self._image_tag(soup, images[key], heading_text, "subheading-image"))
            matched_keys.add(key)

        unmatched = len(images) - len(matched_keys)
        if unmatched > 0:
            logger.warning(f"⚠️ {unmatched} subheading image(s) matched no heading")

        if content.images.title_image:
            figure = self._image_tag(soup, content.images.title_image, title or "Title image", "title-image")
            soup.insert(0, figure)

        if highlight:
            marks = highlight_keywords(soup, parse_keywords(content.original_keywords))
            logger.info(f"🔦 Highlighted {marks} keyword occurrences")

        return str(soup)

    def render_analysis(self, content: GeneratedContent) -> str:
        rows = []
        for item in analyze_keyword_density(content.article_body, content.original_keywords):
            rows.append(
                f"<tr class=\"density-{item.status}\"><td>{html.escape(item.keyword)}</td>"
                f"<td>{item.count}</td><td>{item.density_label}</td><td>{item.status}</td></tr>"
            )
        score = calculate_eeat_score(content.article_body)
        table = (
            "<table class=\"keyword-density\"><thead><tr><th>Keyword</th><th>Count</th>"
            "<th>Density</th><th>Status</th></tr></thead><tbody>"
            + "".join(rows)
            + "</tbody></table>"
        ) if rows else "<p>No keywords to analyze.</p>"
        return f"<section class=\"seo-analysis\"><h2>SEO Analysis</h2><p>E-E-A-T score: {score}/100</p>{table}</section>"

    def render_document(self, content: GeneratedContent, title: str, highlight: bool = False) -> str:
        """Standalone HTML page with the article, its metadata and the SEO analysis."""
        meta = content.meta_description
        status = meta_description_status(meta)
        tags = "".join(f"<span class=\"tag\">#{html.escape(tag)}</span> " for tag in content.tags)

        return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{html.escape(title)}</title>
<meta name="description" content="{html.escape(meta, quote=True)}">
</head>
<body>
<article>
<h1>{html.escape(title)}</h1>
{self.render_html(content, highlight=highlight, title=title)}
</article>
<aside>
<section class="meta-description meta-{status}">
<h2>Meta Description</h2>
<p>{html.escape(meta)}</p>
<p>{len(meta)} chars (Target: {META_DESCRIPTION_MIN}-{META_DESCRIPTION_MAX})</p>
</section>
<section class="tags"><h2>Recommended Tags</h2><p>{tags.strip()}</p></section>
{self.render_analysis(content)}
</aside>
</body>
</html>
"""
