# cipdesign/reports/templates/common.py

from __future__ import annotations
from typing import Any, Sequence
from pathlib import Path

from reportlab.lib.colors import HexColor, black, lightgrey, Color
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from cipdesign.core.config import settings

# Helvetica(WinAnsi)에 없는 기호 치환
_ASCII_SUBS = {
    "≥": ">=",
    "≤": "<=",
    "≈": "~",
    "→": "->",
    "Δ": "d",
    "…": "...",
    "–": "-",
}


def ensure_font(name: str = "NotoSans", path: str | None = None) -> str:
    path = path or settings.FONT_PATH
    try:
        if name not in pdfmetrics.getRegisteredFontNames() and Path(path).exists():
            pdfmetrics.registerFont(TTFont(name, path))
    except Exception:
        return "Helvetica"
    return name if name in pdfmetrics.getRegisteredFontNames() else "Helvetica"


def pdf_text(s: Any, font: str) -> str:
    text = "" if s is None else str(s)
    if not font.startswith("Helvetica"):
        return text
    for k, v in _ASCII_SUBS.items():
        text = text.replace(k, v)
    return text


def hex_color(code: str, default: Color = black) -> Color:
    try:
        return HexColor(code)
    except Exception:
        return default


def fmt_money(v: Any, none: str = "-") -> str:
    if v is None:
        return none
    try:
        return f"${float(v):,.2f}"
    except (TypeError, ValueError):
        return none


def truncate(s: str, n: int) -> str:
    return s if len(s) <= n else s[: max(0, n - 3)] + "..."


def draw_hline(c, x1: float, x2: float, y: float, w: float = 0.6):
    c.setLineWidth(w)
    c.line(x1, y, x2, y)


def draw_table(
        c,
        x: float,
        y: float,
        col_headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        col_widths: Sequence[float],
        row_h: float = 16,
        header_fill: Color = lightgrey,
        text_font: str = "Helvetica",
        text_size: int = 9,
) -> float:
    c.setFont(text_font, text_size)
    c.setFillColor(header_fill)
    c.rect(x, y - row_h, sum(col_widths), row_h, stroke=0, fill=1)
    c.setFillColor(black)

    cx = x
    for i, h in enumerate(col_headers):
        c.drawString(cx + 3, y - row_h + 4, pdf_text(h, text_font))
        cx += col_widths[i]

    ty = y - row_h
    for r in rows:
        ty -= row_h
        cx = x
        for i, cell in enumerate(r):
            c.drawString(cx + 3, ty + 4, pdf_text(cell, text_font))
            cx += col_widths[i]

        draw_hline(c, x, x + sum(col_widths), ty, w=0.4)

    return ty
