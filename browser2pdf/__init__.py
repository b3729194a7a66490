"""Render HTML pages and URLs into one merged PDF with headless Chromium."""

__version__ = "0.1.0"
