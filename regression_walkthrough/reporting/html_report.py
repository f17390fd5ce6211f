"""
Assemble the walkthrough into a single self-contained HTML document.

Sections are added in reading order; each holds paragraphs, tables,
figures and preformatted model summaries.  Figures are embedded as
base64 PNG data URIs so the output file can be opened or shared on its
own.
"""

from __future__ import annotations

import base64
import html
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from string import Template

import matplotlib.pyplot as plt
import pandas as pd

from ..utils.file_io import write_text

logger = logging.getLogger(__name__)

PAGE_TEMPLATE = Template(
    """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>$title</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
            color: #1f2937;
            line-height: 1.6;
            margin: 0;
            background: #f8fafc;
        }
        .container { max-width: 1000px; margin: 0 auto; padding: 24px 32px 64px; background: #ffffff; }
        header { border-bottom: 2px solid #e5e7eb; margin-bottom: 24px; }
        header p { color: #6b7280; font-size: 0.9em; }
        nav ol { padding-left: 20px; }
        h2 { border-bottom: 1px solid #e5e7eb; padding-bottom: 4px; margin-top: 40px; }
        table.dataframe { border-collapse: collapse; margin: 12px 0; font-size: 0.9em; }
        table.dataframe th, table.dataframe td { border: 1px solid #e5e7eb; padding: 4px 10px; text-align: right; }
        table.dataframe th { background: #f3f4f6; }
        table.dataframe tbody th { text-align: left; }
        figure { margin: 16px 0; text-align: center; }
        figure img { max-width: 100%; }
        figcaption { color: #6b7280; font-size: 0.9em; }
        pre { background: #f3f4f6; padding: 12px; overflow-x: auto; font-size: 0.85em; }
        .caption { color: #6b7280; font-size: 0.9em; margin-bottom: 0; }
    </style>
</head>
<body>
<div class="container">
    <header>
        <h1>$title</h1>
        <p>Generated $generated_at</p>
    </header>
    <nav>
        <ol>
$toc
        </ol>
    </nav>
$sections
</div>
</body>
</html>
"""
)


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated anchor id."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "section"


def figure_to_base64(fig, dpi: int = 100) -> str:
    """Render `fig` to PNG, close it and return the base64 payload."""
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


@dataclass
class Section:
    heading: str
    level: int = 2
    anchor: str = ""
    blocks: list[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.anchor:
            self.anchor = slugify(self.heading)


class ReportBuilder:
    """Collects sections of HTML and renders the final page."""

    def __init__(self, title: str, dpi: int = 100):
        self.title = title
        self.dpi = dpi
        self.sections: list[Section] = []

    def add_section(self, heading: str, level: int = 2) -> Section:
        """Start a new section; repeated headings get anchors ending -2, -3, ..."""
        taken = {s.anchor for s in self.sections}
        base = anchor = slugify(heading)
        suffix = 2
        while anchor in taken:
            anchor = f"{base}-{suffix}"
            suffix += 1
        section = Section(heading=heading, level=level, anchor=anchor)
        self.sections.append(section)
        return section

    @property
    def current(self) -> Section:
        if not self.sections:
            raise ValueError("Add a section before adding content")
        return self.sections[-1]

    def add_paragraph(self, text: str) -> None:
        self.current.blocks.append(f"<p>{html.escape(text)}</p>")

    def add_table(self, df: pd.DataFrame, caption: str | None = None, digits: int = 3, index: bool = False) -> None:
        formatted = df.to_html(
            index=index,
            na_rep="",
            float_format=lambda v: f"{v:,.{digits}f}",
            border=0,
            classes="dataframe",
        )
        if caption:
            self.current.blocks.append(f'<p class="caption">{html.escape(caption)}</p>')
        self.current.blocks.append(formatted)

    def add_figure(self, fig, caption: str | None = None) -> None:
        payload = figure_to_base64(fig, dpi=self.dpi)
        alt = html.escape(caption or "figure")
        parts = [f'<figure><img src="data:image/png;base64,{payload}" alt="{alt}" />']
        if caption:
            parts.append(f"<figcaption>{html.escape(caption)}</figcaption>")
        parts.append("</figure>")
        self.current.blocks.append("".join(parts))

    def add_preformatted(self, text: str) -> None:
        self.current.blocks.append(f"<pre>{html.escape(text)}</pre>")

    def render(self) -> str:
        toc_lines = []
        section_html = []
        for section in self.sections:
            heading = html.escape(section.heading)
            if section.level == 2:
                toc_lines.append(f'            <li><a href="#{section.anchor}">{heading}</a></li>')
            tag = f"h{section.level}"
            body = "\n".join(section.blocks)
            section_html.append(
                f'    <section id="{section.anchor}">\n'
                f"        <{tag}>{heading}</{tag}>\n{body}\n    </section>"
            )
        return PAGE_TEMPLATE.substitute(
            title=html.escape(self.title),
            generated_at=datetime.now().strftime("%Y-%m-%d %H:%M"),
            toc="\n".join(toc_lines),
            sections="\n".join(section_html),
        )

    def write(self, path) -> Path:
        path = Path(path)
        logger.info("Writing report to %s", path)
        write_text(self.render(), path)
        return path
