"""
SEO Writer: turns an article brief into a Gemini-generated SEO article with illustrations.
"""

__version__ = "1.0.0"
