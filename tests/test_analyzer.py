"""
Tests for the content analyzer: keyword density, E-E-A-T heuristic and
meta description status.
"""

import unittest

from seo_writer.analyzer import (
    analyze_keyword_density,
    calculate_eeat_score,
    classify_density,
    count_keyword_occurrences,
    meta_description_status,
    parse_keywords,
    DENSITY_HEALTHY,
    DENSITY_OVER_OPTIMIZED,
    DENSITY_UNDER_USED,
    META_ON_TARGET,
    META_TOO_LONG,
    META_TOO_SHORT,
)


class TestParseKeywords(unittest.TestCase):

    def test_trims_lowercases_and_dedups(self):
        self.assertEqual(parse_keywords(" SEO, Ranking ,seo,, "), ["seo", "ranking"])

    def test_empty_string(self):
        self.assertEqual(parse_keywords(""), [])
        self.assertEqual(parse_keywords(" , ,"), [])


class TestKeywordDensity(unittest.TestCase):

    def test_whole_word_case_insensitive(self):
        body = "SEO tips for Seoul. seo matters. Ranking, ranking!"
        result = analyze_keyword_density(body, "seo, ranking")

        self.assertEqual([r.keyword for r in result], ["seo", "ranking"])
        seo, ranking = result
        # 8 whitespace-delimited words; "Seoul" is not a match.
        self.assertEqual(seo.count, 2)
        self.assertEqual(seo.density, 25.0)
        self.assertEqual(ranking.count, 2)
        self.assertEqual(ranking.density_label, "25.00%")

    def test_density_rounded_to_two_decimals(self):
        result = analyze_keyword_density("seo is fun", "seo")
        self.assertEqual(result[0].density, 33.33)
        self.assertEqual(result[0].density_label, "33.33%")

    def test_keyword_punctuation_is_escaped(self):
        self.assertEqual(count_keyword_occurrences("the c.e.o met a cxeyo", "c.e.o"), 1)

    def test_keywords_ending_or_starting_with_punctuation(self):
        self.assertEqual(count_keyword_occurrences("I write c++ daily. C++ is fast.", "c++"), 2)
        self.assertEqual(count_keyword_occurrences("learn c# now", "c#"), 1)
        self.assertEqual(count_keyword_occurrences("Ship it on .NET today", ".net"), 1)
        # Still standalone terms only.
        self.assertEqual(count_keyword_occurrences("asp.net and abc++", ".net"), 0)
        self.assertEqual(count_keyword_occurrences("cc++ code", "c++"), 0)

        result = analyze_keyword_density("I write c++ daily. c++ is fast.", "c++")
        self.assertEqual(result[0].count, 2)
        self.assertNotEqual(result[0].status, DENSITY_UNDER_USED)

    def test_no_keywords_yields_empty_analysis(self):
        self.assertEqual(analyze_keyword_density("Some article text", ""), ())
        self.assertEqual(analyze_keyword_density("Some article text", " , "), ())

    def test_empty_body_does_not_divide_by_zero(self):
        result = analyze_keyword_density("", "seo")
        self.assertEqual(result[0].count, 0)
        self.assertEqual(result[0].density, 0.0)
        self.assertEqual(result[0].status, DENSITY_UNDER_USED)

    def test_classification_bands(self):
        self.assertEqual(classify_density(2.6), DENSITY_OVER_OPTIMIZED)
        self.assertEqual(classify_density(2.5), DENSITY_HEALTHY)
        self.assertEqual(classify_density(1.0), DENSITY_HEALTHY)
        self.assertEqual(classify_density(0.5), DENSITY_HEALTHY)
        self.assertEqual(classify_density(0.49), DENSITY_UNDER_USED)

    def test_status_attached_to_result(self):
        body = " ".join(["seo"] + ["word"] * 99)
        self.assertEqual(analyze_keyword_density(body, "seo")[0].status, DENSITY_HEALTHY)
        body = " ".join(["seo"] * 5 + ["word"] * 95)
        self.assertEqual(analyze_keyword_density(body, "seo")[0].status, DENSITY_OVER_OPTIMIZED)


class TestEEATScore(unittest.TestCase):

    LONG_TEXT = "x" * 1001
    HEADINGS = "## One\ntext\n## Two\ntext\n## Three\ntext\n"

    def test_base_score(self):
        self.assertEqual(calculate_eeat_score("short"), 70)

    def test_each_condition_adds_independently(self):
        self.assertEqual(calculate_eeat_score(self.LONG_TEXT), 80)
        self.assertEqual(calculate_eeat_score(self.HEADINGS), 80)
        self.assertEqual(calculate_eeat_score("Kesimpulan singkat."), 80)
        self.assertEqual(calculate_eeat_score("In conclusion, done."), 80)

    def test_all_conditions(self):
        body = self.HEADINGS + "## Conclusion\n" + self.LONG_TEXT
        self.assertEqual(calculate_eeat_score(body), 100)

    def test_third_level_headings_do_not_count(self):
        self.assertEqual(calculate_eeat_score("### One\n### Two\n### Three\n"), 70)

    def test_always_in_range(self):
        samples = ["", self.LONG_TEXT, self.HEADINGS, self.HEADINGS + "Conclusion" + self.LONG_TEXT]
        for body in samples:
            score = calculate_eeat_score(body)
            self.assertGreaterEqual(score, 70)
            self.assertLessEqual(score, 100)


class TestMetaDescriptionStatus(unittest.TestCase):

    def test_on_target(self):
        self.assertEqual(meta_description_status("a" * 120), META_ON_TARGET)
        self.assertEqual(meta_description_status("a" * 115), META_ON_TARGET)
        self.assertEqual(meta_description_status("a" * 125), META_ON_TARGET)

    def test_flagged(self):
        self.assertEqual(meta_description_status("a" * 130), META_TOO_LONG)
        self.assertEqual(meta_description_status("a" * 100), META_TOO_SHORT)


if __name__ == '__main__':
    unittest.main()
