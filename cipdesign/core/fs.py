# cipdesign/core/fs.py

from pathlib import Path


def ensure_sqlite_dir(url: str) -> None:
    """sqlite:///path/to/db.sqlite 형태에서 폴더 자동 생성 (in-memory 는 무시)"""
    if not url.startswith("sqlite"):
        return
    # sqlite:///./.data/cipdesign.db → "./.data/cipdesign.db"
    path_part = url.split("///", 1)[1] if "///" in url else ""
    path_part = path_part.split("?", 1)[0]
    if not path_part or path_part == ":memory:":
        return
    Path(path_part).parent.mkdir(parents=True, exist_ok=True)


def export_filename(run_id: str, fmt: str) -> str:
    return f"cip_bom_{run_id}.{fmt.lower()}"


def write_bytes(path: str | Path, data: bytes) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    return out
