"""
Subpackage for rendering the walkthrough document.

`html_report` collects tables, figures and text into an ordered set of
sections and writes them out as one self-contained HTML page.
"""

__all__ = ["html_report"]
