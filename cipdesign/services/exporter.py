# cipdesign/services/exporter.py
# BOM 내보내기: CSV / XLSX (openpyxl) / PDF 디자인 시트 (reportlab)

from __future__ import annotations

import csv
import io
from typing import Any, Dict, List, Optional, Tuple

from openpyxl import Workbook
from openpyxl.styles import Font
from reportlab.pdfgen import canvas

from cipdesign.reports.templates.design_sheet import PAGE, draw_design_sheet
from cipdesign.schemas import CIPDesignResult

EXPORT_COLUMNS = ["Item", "Qty", "Specification", "Comments", "Unit Cost", "Extended Cost"]

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}


def bom_rows(result: CIPDesignResult) -> List[Dict[str, Any]]:
    return [
        {
            "Item": line.item,
            "Qty": line.qty,
            "Specification": line.specification,
            "Comments": line.comments or "",
            "Unit Cost": line.unit_cost,
            "Extended Cost": line.extended_cost,
        }
        for line in result.bom
    ]


def summary_rows(result: CIPDesignResult) -> List[Tuple[str, Any]]:
    s = result.summary
    return [
        ("F1 (gpm)", s.f1),
        ("F2 (gpm)", s.f2),
        ("Fmax (gpm)", s.fmax),
        ("Tank (gal)", s.tank_gal),
        ("Heater (kW)", s.heater_kw),
        ("Pump", s.pump),
        ("Total cost (priced lines)", result.total_cost()),
    ]


def to_csv_bytes(result: CIPDesignResult) -> bytes:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for row in bom_rows(result):
        writer.writerow({k: ("" if v is None else v) for k, v in row.items()})
    return buf.getvalue().encode("utf-8")


def to_xlsx_bytes(result: CIPDesignResult) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "BOM"
    ws.append(EXPORT_COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in bom_rows(result):
        ws.append([row[k] for k in EXPORT_COLUMNS])
    ws.append(["Total", None, None, None, None, result.total_cost()])
    ws.cell(row=ws.max_row, column=1).font = Font(bold=True)

    for col, width in zip("ABCDEF", (30, 6, 60, 45, 12, 14)):
        ws.column_dimensions[col].width = width

    ws2 = wb.create_sheet("Summary")
    ws2.append(["Metric", "Value"])
    for cell in ws2[1]:
        cell.font = Font(bold=True)
    for k, v in summary_rows(result):
        ws2.append([k, v])
    ws2.column_dimensions["A"].width = 26
    ws2.column_dimensions["B"].width = 80

    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()


def to_pdf_bytes(result: CIPDesignResult, run_id: Optional[str] = None) -> bytes:
    out = io.BytesIO()
    c = canvas.Canvas(out, pagesize=PAGE)
    c.setTitle("CIP Skid Design Sheet")
    draw_design_sheet(c, result, run_id=run_id)
    c.save()
    return out.getvalue()


def export_bytes(
    result: CIPDesignResult, fmt: str, run_id: Optional[str] = None
) -> Tuple[bytes, str]:
    """(content, media_type). 지원하지 않는 포맷이면 ValueError."""
    f = (fmt or "").strip().lower()
    if f == "csv":
        data = to_csv_bytes(result)
    elif f == "xlsx":
        data = to_xlsx_bytes(result)
    elif f == "pdf":
        data = to_pdf_bytes(result, run_id=run_id)
    else:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    return data, MEDIA_TYPES[f]
