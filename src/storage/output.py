from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TextIO

from ..schema.models import FunctionDetails


def render_json(details: FunctionDetails, indent: int = 2) -> str:
    """Serialize function details as pretty-printed JSON."""
    return json.dumps(details.to_dict(), indent=indent)


def write_output(text: str, destination: str | Path, stdout: TextIO | None = None) -> None:
    """Write `text` to stdout when destination is "-", otherwise to a file."""
    if str(destination) == "-":
        stream = stdout or sys.stdout
        stream.write(text + "\n")
        stream.flush()
        return

    out_file = Path(destination)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    with out_file.open("w", encoding="utf-8") as fp:
        fp.write(text + "\n")
