# cipdesign/reports/templates/design_sheet.py

from __future__ import annotations
from datetime import datetime
from typing import Optional

from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm

from cipdesign.core.config import settings
from cipdesign.schemas import CIPDesignResult
from .common import draw_table, ensure_font, fmt_money, hex_color, pdf_text, truncate

PAGE = landscape(A4)
BOM_HEADERS = ["Item", "Qty", "Specification", "Comments", "Unit Cost", "Extended"]
BOM_COL_WIDTHS = [48 * mm, 12 * mm, 88 * mm, 70 * mm, 25 * mm, 27 * mm]
ROWS_PER_PAGE = 22


def _bom_rows(result: CIPDesignResult) -> list[list[str]]:
    return [
        [
            truncate(line.item, 30),
            str(line.qty),
            truncate(line.specification, 58),
            truncate(line.comments or "", 46),
            fmt_money(line.unit_cost),
            fmt_money(line.extended_cost),
        ]
        for line in result.bom
    ]


def draw_design_sheet(
    c,
    result: CIPDesignResult,
    title: str = "CIP Skid Design Sheet",
    run_id: Optional[str] = None,
):
    W, H = PAGE
    font = ensure_font()
    brand = hex_color(settings.BRAND_PRIMARY)

    # 타이틀 밴드
    c.setFillColor(brand)
    c.rect(0, H - 28 * mm, W, 28 * mm, fill=1, stroke=0)
    c.setFillColorRGB(1, 1, 1)
    c.setFont(font, 20)
    c.drawString(15 * mm, H - 17 * mm, pdf_text(title, font))
    c.setFont(font, 10)
    sub = f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}"
    if run_id:
        sub += f"   Run: {run_id}"
    c.drawString(15 * mm, H - 24 * mm, sub)

    # Summary
    s = result.summary
    c.setFillColorRGB(0, 0, 0)
    c.setFont(font, 10)
    y = H - 38 * mm
    lines = [
        f"Stage 1 flow: {s.f1:g} gpm    Stage 2 flow: {s.f2:g} gpm    Design flow (max): {s.fmax:g} gpm",
        f"CIP tank: {s.tank_gal} gal    Heater: {f'{s.heater_kw} kW' if s.heater_kw is not None else 'None'}",
        f"Pump: {s.pump}",
    ]
    for ln in lines:
        c.drawString(15 * mm, y, pdf_text(ln, font))
        y -= 6 * mm

    # BOM table (페이지 넘김)
    rows = _bom_rows(result)
    y -= 2 * mm
    for start in range(0, max(len(rows), 1), ROWS_PER_PAGE):
        chunk = rows[start:start + ROWS_PER_PAGE]
        y = draw_table(c, 15 * mm, y, BOM_HEADERS, chunk, BOM_COL_WIDTHS, text_font=font, text_size=8)
        if start + ROWS_PER_PAGE < len(rows):
            c.showPage()
            y = H - 15 * mm

    c.setFont(font, 11)
    c.drawString(15 * mm, y - 8 * mm, pdf_text(f"Total (priced lines): {fmt_money(result.total_cost())}", font))
    c.showPage()
