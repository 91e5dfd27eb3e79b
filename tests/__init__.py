"""Test suite for TableSum.

Hermetic pytest tests: Playwright is mocked, pages are served from canned
cell texts, and all file output goes to tmp_path.
"""
