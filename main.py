"""
Entry point for SEO Writer.
Delegates to seo_writer.main.
"""
import sys
import os

# Add the current directory to python path
sys.path.append(os.getcwd())

from seo_writer.main import main

if __name__ == "__main__":
    sys.exit(main())
