# cipdesign/cli.py

from __future__ import annotations
import json
from enum import Enum
from typing import Any

import typer
from pydantic import ValidationError

from cipdesign.core.fs import write_bytes
from cipdesign.schemas import CIPInput
from cipdesign.services.ai_chat import validate_parameters
from cipdesign.services.catalog import get_catalog
from cipdesign.services.cip import calculate
from cipdesign.services.design import compute_priced_design
from cipdesign.services.exporter import export_bytes

app = typer.Typer(help="CIP skid sizing / BOM tools")


class ExportFormat(str, Enum):
    csv = "csv"
    xlsx = "xlsx"
    pdf = "pdf"


def _read_json(json_path: str) -> Any:
    try:
        with open(json_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        typer.echo(f"cannot read {json_path}: {e}", err=True)
        raise typer.Exit(code=2)
    except json.JSONDecodeError as e:
        typer.echo(f"invalid JSON in {json_path}: {e}", err=True)
        raise typer.Exit(code=2)


def _load_input(json_path: str) -> CIPInput:
    raw = _read_json(json_path)
    try:
        return CIPInput.model_validate(raw)
    except ValidationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)


@app.command("calculate")
def calculate_cmd(json_path: str, price: bool = True, pretty: bool = True):
    payload = _load_input(json_path)
    out = compute_priced_design(payload) if price else calculate(payload)
    print(out.model_dump_json(by_alias=True, indent=2 if pretty else None))


@app.command("export")
def export_cmd(
    json_path: str,
    out_path: str,
    fmt: ExportFormat = typer.Option(ExportFormat.csv, "--format", "-f"),
):
    payload = _load_input(json_path)
    result = compute_priced_design(payload)
    content, _ = export_bytes(result, fmt.value)
    path = write_bytes(out_path, content)
    print(f"wrote {path} ({len(content)} bytes)")


@app.command("catalog")
def catalog_cmd():
    print(json.dumps([e.to_dict() for e in get_catalog()], indent=2, ensure_ascii=False))


@app.command("validate")
def validate_cmd(json_path: str, system_type: str = "cip-ro"):
    params = _read_json(json_path)
    warnings = validate_parameters(params, system_type)
    for w in warnings:
        print(w)
    if not warnings:
        print("no warnings")


if __name__ == "__main__":
    app()
