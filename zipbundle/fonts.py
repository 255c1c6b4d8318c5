from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FontRegistry:
    normal: str
    bold: str
    mono: str


BUILTIN_FONTS = FontRegistry(normal="Helvetica", bold="Helvetica-Bold", mono="Courier")

# File names in a bundle are not always ASCII; prefer a CJK-capable font.
CJK_CANDIDATES = [
    r"C:\Windows\Fonts\msyh.ttc",
    r"C:\Windows\Fonts\simhei.ttf",
    "/System/Library/Fonts/PingFang.ttc",
    "/Library/Fonts/Arial Unicode.ttf",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
]


@lru_cache(maxsize=1)
def register_fonts() -> FontRegistry:
    for font_path in CJK_CANDIDATES:
        if not os.path.exists(font_path):
            continue
        try:
            pdfmetrics.registerFont(TTFont("Bundle_CJK", font_path))
        except Exception as exc:
            log.debug("font registration failed for %s: %s", font_path, exc)
            continue
        log.debug("report font: %s", font_path)
        return FontRegistry(normal="Bundle_CJK", bold="Bundle_CJK", mono="Bundle_CJK")
    log.debug("no CJK font found, non-latin names will render as boxes")
    return BUILTIN_FONTS
