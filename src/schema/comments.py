from __future__ import annotations

import re

from ..analysis.data import CommentBlock

SLASH_COMMENT_PREFIX_RE = re.compile(r"^// ?")
BLOCK_LINE_PREFIX_RE = re.compile(r"^\s*\* ?")


def trim_comment_prefix(text: str) -> list[str]:
    """Strip comment markers, returning one entry per physical line."""
    if text.startswith("/*"):
        body = text[2:]
        if body.endswith("*/"):
            body = body[:-2]
        lines = [BLOCK_LINE_PREFIX_RE.sub("", line).strip() for line in body.splitlines()]
        return [line for line in lines if line]
    return [SLASH_COMMENT_PREFIX_RE.sub("", text)]


def cleanup_comment(*blocks: CommentBlock) -> str:
    """Join the lines of the given comment blocks with single spaces."""
    parts: list[str] = []
    for block in blocks:
        if not block:
            continue
        for text in block.texts:
            parts.extend(trim_comment_prefix(text))
    return " ".join(parts)
