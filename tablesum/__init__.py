"""TableSum core package.

Components:
- parsing: numeric token extraction and normalization
- accumulator: per-page subtotal computation
- source: the cell-text capability interface and a canned implementation
- browser: Playwright browser lifecycle and navigation
- scraper: browser-backed cell text source
- runner: the run driver producing page subtotals and the grand total
- reporter: optional Excel/HTML export of a run
- logger: loguru console and JSON file logging
- exceptions: custom exception hierarchy
"""

__version__ = "1.0.0"
