"""
Tests for rendering: heading image resolution, keyword highlighting,
HTML document and copy text.
"""

import unittest

from bs4 import BeautifulSoup

from seo_writer.main_schemas import GeneratedContent, GeneratedImages
from seo_writer.renderer import ArticleRenderer, build_copy_text, HIGHLIGHT_CLASS
from seo_writer.utils.matching import find_heading_image, find_heading_key, is_conclusion_heading, normalize_text

BODY = (
    "Intro about seo and ranking.\n"
    "\n"
    "## Benefits of SEO\n"
    "\n"
    "SEO helps. Seoul is a city.\n"
    "\n"
    "## Conclusion\n"
    "\n"
    "Done with ranking.\n"
)


def make_content(**overrides) -> GeneratedContent:
    data = {
        "article_body": BODY,
        "meta_description": "d" * 120,
        "tags": ["seo", "ranking", "tips"],
        "images": GeneratedImages(
            title_image="data:image/png;base64,TTT",
            subheading_images={"Benefits of SEO": "data:image/png;base64,AAA"},
        ),
        "original_keywords": "seo, ranking",
    }
    data.update(overrides)
    return GeneratedContent(**data)


class TestHeadingMatching(unittest.TestCase):

    IMAGES = {"Benefits of SEO": "img-1", "SEO Tools": "img-2"}

    def test_exact_match(self):
        self.assertEqual(find_heading_image("SEO Tools", self.IMAGES), "img-2")

    def test_normalized_match(self):
        self.assertEqual(find_heading_image("  benefits   of **SEO** ", self.IMAGES), "img-1")

    def test_partial_match_is_opt_in(self):
        self.assertIsNone(find_heading_image("Benefits", self.IMAGES))
        self.assertEqual(find_heading_image("Benefits", self.IMAGES, allow_partial=True), "img-1")

    def test_partial_match_takes_first_key_in_order(self):
        self.assertEqual(find_heading_image("SEO", self.IMAGES, allow_partial=True), "img-1")

    def test_key_lookup_returns_the_image_key(self):
        self.assertEqual(find_heading_key("benefits of seo", self.IMAGES), "Benefits of SEO")
        self.assertEqual(find_heading_key("SEO Tools", self.IMAGES), "SEO Tools")
        self.assertIsNone(find_heading_key("Pricing", self.IMAGES))

    def test_no_match(self):
        self.assertIsNone(find_heading_image("Pricing", self.IMAGES, allow_partial=True))
        self.assertIsNone(find_heading_image("Pricing", {}))

    def test_helpers(self):
        self.assertEqual(normalize_text("## Hello  _World_"), "hello world")
        self.assertTrue(is_conclusion_heading("Kesimpulan Akhir"))
        self.assertTrue(is_conclusion_heading("CONCLUSION"))
        self.assertFalse(is_conclusion_heading("Introduction"))


class TestArticleRenderer(unittest.TestCase):

    def setUp(self):
        self.renderer = ArticleRenderer()

    def test_images_attached(self):
        soup = BeautifulSoup(self.renderer.render_html(make_content(), title="Guide"), "html.parser")

        figures = soup.find_all("figure")
        self.assertEqual(figures[0]["class"], ["title-image"])
        self.assertEqual(figures[0].img["src"], "data:image/png;base64,TTT")

        heading = soup.find("h2", string="Benefits of SEO")
        sibling = heading.find_next_sibling()
        self.assertEqual(sibling.name, "figure")
        self.assertEqual(sibling.img["src"], "data:image/png;base64,AAA")

        conclusion = soup.find("h2", string="Conclusion")
        self.assertNotEqual(conclusion.find_next_sibling().name, "figure")

    def test_no_highlight_by_default(self):
        html = self.renderer.render_html(make_content())
        self.assertNotIn("<mark", html)

    def test_keyword_highlighting(self):
        soup = BeautifulSoup(self.renderer.render_html(make_content(), highlight=True), "html.parser")

        marks = [m.get_text() for m in soup.find_all("mark", class_=HIGHLIGHT_CLASS)]
        self.assertEqual(marks, ["seo", "ranking", "SEO", "ranking"])
        self.assertIsNone(soup.find("h2").find("mark"))
        self.assertIn("Seoul is a city.", soup.get_text())

    def test_punctuated_keyword_is_highlighted(self):
        content = make_content(
            article_body="We teach c++ and C# here.\n\n## Why c++\n\nPlain text.\n",
            original_keywords="c++, c#",
            images=GeneratedImages(),
        )
        soup = BeautifulSoup(self.renderer.render_html(content, highlight=True), "html.parser")

        marks = [m.get_text() for m in soup.find_all("mark", class_=HIGHLIGHT_CLASS)]
        self.assertEqual(marks, ["c++", "C#"])

    def test_each_image_attached_once_for_duplicate_headings(self):
        body = "## Benefits of SEO\n\nFirst.\n\n## benefits of seo\n\nSecond.\n"
        images = GeneratedImages(subheading_images={
            "Benefits of SEO": "data:image/png;base64,AAA",
            "Pricing": "data:image/png;base64,BBB",
        })

        with self.assertLogs("seo_writer.renderer", level="WARNING") as logs:
            html = self.renderer.render_html(make_content(article_body=body, images=images))

        soup = BeautifulSoup(html, "html.parser")
        figures = soup.find_all("figure", class_="subheading-image")
        self.assertEqual(len(figures), 1)
        self.assertEqual(figures[0].img["src"], "data:image/png;base64,AAA")
        self.assertEqual(soup.find_all("h2")[0].find_next_sibling().name, "figure")
        self.assertTrue(any("1 subheading image(s) matched no heading" in line for line in logs.output))

    def test_no_unmatched_warning_when_every_image_is_used(self):
        body = "## Benefits of SEO\n\nFirst.\n\n## benefits of seo\n\nSecond.\n"
        images = GeneratedImages(subheading_images={"Benefits of SEO": "data:image/png;base64,AAA"})

        with self.assertNoLogs("seo_writer.renderer", level="WARNING"):
            self.renderer.render_html(make_content(article_body=body, images=images))

    def test_document_contains_metadata_and_analysis(self):
        document = self.renderer.render_document(make_content(), title="Guide")

        self.assertIn("<title>Guide</title>", document)
        self.assertIn("meta-on-target", document)
        self.assertIn("#ranking", document)
        self.assertIn("E-E-A-T score:", document)
        self.assertIn("keyword-density", document)

    def test_document_flags_long_meta_description(self):
        document = self.renderer.render_document(make_content(meta_description="d" * 130), title="Guide")
        self.assertIn("meta-too-long", document)


class TestCopyText(unittest.TestCase):

    def test_copy_text_layout(self):
        text = build_copy_text(make_content())

        self.assertTrue(text.startswith(BODY))
        self.assertIn("---\nMeta Description:\n" + "d" * 120, text)
        self.assertIn("Tags:\nseo, ranking, tips", text)


if __name__ == '__main__':
    unittest.main()
