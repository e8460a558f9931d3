from .output import render_json, write_output

__all__ = [
    "render_json",
    "write_output",
]
