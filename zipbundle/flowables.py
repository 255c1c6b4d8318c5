from reportlab.lib.colors import Color, HexColor, white
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.platypus.flowables import Flowable

from .fonts import FontRegistry
from .models import EntryOutcome
from .theme import COLORS


OUTCOME_COLORS = {
    EntryOutcome.ADDED: COLORS["green"],
    EntryOutcome.IGNORED: COLORS["muted"],
    EntryOutcome.FAILED: COLORS["red"],
}


class StatusBanner(Flowable):
    """Full-width band with a tick or cross badge and the final status message."""

    def __init__(self, ok: bool, message: str, detail: str = "",
                 fonts: FontRegistry | None = None,
                 width: float | None = None):
        super().__init__()
        self.ok = ok
        self.message = message
        self.detail = detail
        self.fonts = fonts
        self.banner_width = width or (A4[0] - 30 * mm)
        self.banner_height = 36 if detail else 26

    @property
    def color(self) -> Color:
        return COLORS["green"] if self.ok else COLORS["red"]

    def wrap(self, availWidth, availHeight):
        self.banner_width = min(self.banner_width, availWidth)
        return (self.banner_width, self.banner_height)

    def _badge(self, cx: float, cy: float) -> None:
        canv = self.canv
        canv.setFillColor(white)
        canv.circle(cx, cy, 8, stroke=0, fill=1)
        canv.setStrokeColor(self.color)
        canv.setLineWidth(2)
        if self.ok:
            path = canv.beginPath()
            path.moveTo(cx - 4, cy)
            path.lineTo(cx - 1, cy - 3)
            path.lineTo(cx + 4, cy + 3)
            canv.drawPath(path, stroke=1, fill=0)
        else:
            canv.line(cx - 3, cy - 3, cx + 3, cy + 3)
            canv.line(cx - 3, cy + 3, cx + 3, cy - 3)

    def draw(self):
        canv = self.canv
        h = self.banner_height
        canv.setFillColor(self.color)
        canv.rect(0, 0, self.banner_width, h, stroke=0, fill=1)
        self._badge(16, h / 2)
        canv.setFillColor(white)
        canv.setFont(self.fonts.bold if self.fonts else "Helvetica-Bold", 11)
        canv.drawString(32, h - 16, self.message)
        if self.detail:
            canv.setFont(self.fonts.normal if self.fonts else "Helvetica", 7)
            canv.setFillColor(HexColor("#f0f0f0"))
            canv.drawString(32, 7, self.detail)


class OutcomeBar(Flowable):
    """
    Stacked horizontal bar showing how the walked files split by outcome.

    Each segment is as wide as its share of the walk; a legend with the raw
    counts sits underneath. Outcomes with no files get no segment.
    """

    bar_height = 12
    legend_height = 14

    def __init__(self, counts: dict[EntryOutcome, int],
                 fonts: FontRegistry | None = None,
                 width: float | None = None):
        super().__init__()
        self.counts = counts
        self.fonts = fonts
        self.bar_width = width or (A4[0] - 30 * mm)

    def segments(self) -> list[tuple[EntryOutcome, int, float]]:
        total = sum(self.counts.values())
        if not total:
            return []
        return [
            (outcome, self.counts.get(outcome, 0), self.bar_width * self.counts.get(outcome, 0) / total)
            for outcome in EntryOutcome
            if self.counts.get(outcome, 0)
        ]

    def wrap(self, availWidth, availHeight):
        self.bar_width = min(self.bar_width, availWidth)
        return (self.bar_width, self.bar_height + self.legend_height)

    def draw(self):
        canv = self.canv
        y = self.legend_height
        segments = self.segments()
        if not segments:
            canv.setStrokeColor(COLORS["border"])
            canv.rect(0, y, self.bar_width, self.bar_height, stroke=1, fill=0)
        x = 0.0
        for outcome, _, seg_width in segments:
            canv.setFillColor(OUTCOME_COLORS[outcome])
            canv.rect(x, y, seg_width, self.bar_height, stroke=0, fill=1)
            x += seg_width

        canv.setFont(self.fonts.normal if self.fonts else "Helvetica", 7)
        x = 0.0
        for outcome in EntryOutcome:
            label = f"{outcome.value} {self.counts.get(outcome, 0)}"
            canv.setFillColor(OUTCOME_COLORS[outcome])
            canv.rect(x, 3, 6, 6, stroke=0, fill=1)
            canv.setFillColor(COLORS["muted"])
            canv.drawString(x + 9, 3, label)
            x += 70
