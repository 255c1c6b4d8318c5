"""
PDF summary of a bundling run.

The report shows the final status, how the walked files split between
ADDED, IGNORED and FAILED, the walked tree with ignored directories folded,
and a per-file table, so a bundle can be reviewed without unzipping it.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from pathlib import Path

from reportlab.lib.colors import Color, HexColor, white
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, Preformatted, SimpleDocTemplate, Spacer, Table, TableStyle

from .file_utils import build_tree
from .flowables import OUTCOME_COLORS, OutcomeBar, StatusBanner
from .fonts import FontRegistry, register_fonts
from .models import EntryOutcome, PackagingResult
from .theme import COLORS
from .utils import fmt_size, xml_escape


log = logging.getLogger(__name__)

MAX_TREE_LINES = 200


class BundleReport:
    def __init__(self, result: PackagingResult, source_name: str = "",
                 fonts: FontRegistry | None = None):
        self.result = result
        self.source_name = source_name or (
            result.archive_path.stem if result.archive_path else "bundle")
        self.fonts = fonts or register_fonts()
        self.page_width, self.page_height = A4
        self.margin = 15 * mm
        self.content_width = self.page_width - 2 * self.margin

    def _style(self, name, parent_name="Normal", **kwargs):
        parent = getSampleStyleSheet()[parent_name]
        defaults = {"fontName": self.fonts.normal, "fontSize": parent.fontSize}
        defaults.update(kwargs)
        return ParagraphStyle(name, parent=parent, **defaults)

    def _page_footer(self, canvas, doc):
        canvas.saveState()
        canvas.setFont(self.fonts.normal, 7)
        canvas.setFillColor(COLORS["muted"])
        canvas.drawString(self.margin, 10 * mm, f"zipbundle · {self.source_name}")
        canvas.drawRightString(self.page_width - self.margin, 10 * mm, f"Page {doc.page}")
        canvas.restoreState()

    def write(self, out_path: str | Path) -> Path:
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        doc = SimpleDocTemplate(
            str(out_path), pagesize=A4,
            leftMargin=self.margin, rightMargin=self.margin,
            topMargin=self.margin, bottomMargin=15 * mm,
            title=f"{self.source_name} bundle report",
        )
        doc.build(self.build_story(),
                  onFirstPage=self._page_footer,
                  onLaterPages=self._page_footer)
        log.info("Report: %s", out_path.resolve())
        return out_path

    def build_story(self) -> list:
        result = self.result
        cw = self.content_width
        outcomes = result.outcomes()
        story: list = [Spacer(1, 8 * mm)]

        title_style = self._style(
            "BTitle", "Title", fontSize=24, fontName=self.fonts.bold,
            textColor=COLORS["accent"], spaceAfter=4 * mm,
        )
        story.append(Paragraph(xml_escape(self.source_name), title_style))
        sub_style = self._style("BSub", fontSize=9, textColor=COLORS["muted"], spaceAfter=6 * mm)
        archive = str(result.archive_path) if result.archive_path else "(none)"
        story.append(Paragraph(
            f"Bundle report · {xml_escape(archive)} · "
            f"Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}",
            sub_style))

        story.append(StatusBanner(result.ok, f"STATUS: {result.message}", self._status_detail(),
                                  fonts=self.fonts, width=cw))
        story.append(Spacer(1, 5 * mm))
        story.append(OutcomeBar(Counter(outcome for _, outcome in outcomes),
                                fonts=self.fonts, width=cw))
        story.append(Spacer(1, 6 * mm))

        if result.failed_entries:
            story.extend(self._failures_section())

        story.append(self._heading("Walked Tree", f"{len(result.written)} written"))
        tree_entries = [
            (path, "" if outcome is EntryOutcome.ADDED else outcome.value)
            for path, outcome in outcomes
        ]
        tree_lines = build_tree(tree_entries, self.source_name, style="ascii").split("\n")
        if len(tree_lines) > MAX_TREE_LINES:
            tree_lines = tree_lines[:MAX_TREE_LINES] + [
                f"  ... ({len(tree_lines)} lines total)"]
        mono = self._style("BMono", fontName=self.fonts.mono, fontSize=7, leading=9)
        story.append(Preformatted("\n".join(tree_lines), mono))
        story.append(Spacer(1, 6 * mm))

        story.extend(self._decisions_section(outcomes))
        return story

    def _status_detail(self) -> str:
        parts = [f"{self.result.total_files_written} entries in archive"]
        path = self.result.archive_path
        if path is not None and path.is_file():
            parts.append(f"archive size {fmt_size(path.stat().st_size)}")
        return " · ".join(parts)

    def _heading(self, text: str, subtext: str, color: Color | None = None) -> Paragraph:
        style = self._style(
            f"BHead{text}", fontName=self.fonts.bold, fontSize=10, leading=13,
            textColor=white, backColor=color or COLORS["header_bg"],
            borderPadding=5, spaceBefore=2 * mm, spaceAfter=4 * mm,
        )
        return Paragraph(
            f'{xml_escape(text)}  <font size="7" color="#d0e8ff">{xml_escape(subtext)}</font>',
            style,
        )

    def _table_style(self) -> TableStyle:
        return TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), COLORS["header_bg"]),
            ("TEXTCOLOR", (0, 0), (-1, 0), white),
            ("FONTSIZE", (0, 0), (-1, -1), 7),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("GRID", (0, 0), (-1, -1), 0.5, COLORS["border"]),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [white, COLORS["row_alt"]]),
        ])

    def _decisions_section(self, outcomes: list[tuple[str, EntryOutcome]]) -> list:
        cw = self.content_width
        fs = self._style("BCell", fontSize=7)
        data = [[
            Paragraph("<b>#</b>", fs),
            Paragraph("<b>Path</b>", fs),
            Paragraph("<b>Outcome</b>", fs),
        ]]
        for idx, (path, outcome) in enumerate(outcomes, start=1):
            color = OUTCOME_COLORS[outcome]
            data.append([
                Paragraph(str(idx), fs),
                Paragraph(xml_escape(path), fs),
                Paragraph(f'<font color="{color.hexval()}">{outcome.value}</font>', fs),
            ])
        table = Table(data, colWidths=[cw * 0.08, cw * 0.74, cw * 0.18], repeatRows=1)
        table.setStyle(self._table_style())
        return [
            self._heading("File Decisions", f"{len(outcomes)} files seen"),
            table,
        ]

    def _failures_section(self) -> list:
        cw = self.content_width
        fs = self._style("BFail", fontSize=7)
        data = [[Paragraph("<b>Path</b>", fs), Paragraph("<b>Reason</b>", fs)]]
        for failure in self.result.failed_entries:
            data.append([
                Paragraph(xml_escape(failure.relative_path), fs),
                Paragraph(xml_escape(failure.reason), fs),
            ])
        table = Table(data, colWidths=[cw * 0.45, cw * 0.55], repeatRows=1)
        style = self._table_style()
        style.add("TEXTCOLOR", (0, 1), (-1, -1), HexColor("#7b241c"))
        table.setStyle(style)
        return [
            self._heading("Write Failures", f"{len(self.result.failed_entries)} entries",
                          color=COLORS["red"]),
            table,
            Spacer(1, 6 * mm),
        ]


def write_bundle_report(result: PackagingResult, out_path: str | Path,
                        source_name: str = "") -> Path:
    return BundleReport(result, source_name=source_name).write(out_path)
