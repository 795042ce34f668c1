# ============================================================================
# src/prescription_tracker/notes/frontmatter.py
# ============================================================================
"""
YAML front matter for Markdown notes.
"""

import logging
from typing import Any, Dict, Tuple

import yaml

logger = logging.getLogger(__name__)

DELIMITER = "---"


def render_frontmatter(data: Dict[str, Any]) -> str:
    """Render data as a '---' delimited YAML block, keys in insertion order."""
    body = yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=1000,
    )
    return f"{DELIMITER}\n{body}{DELIMITER}\n"


def split_frontmatter(text: str) -> Tuple[str, str]:
    """Return (yaml_block, body); yaml_block is '' when the note has none."""
    if not text.startswith(DELIMITER + "\n") and not text.startswith(DELIMITER + "\r\n"):
        return "", text

    lines = text.splitlines(keepends=True)
    for index in range(1, len(lines)):
        if lines[index].rstrip("\r\n") == DELIMITER:
            return "".join(lines[1:index]), "".join(lines[index + 1:])

    return "", text


def parse_frontmatter(text: str) -> Dict[str, Any]:
    """
    Front matter of a note as a dict.

    Notes without front matter, or with YAML that does not parse to a
    mapping, give {}.
    """
    block, _ = split_frontmatter(text)
    if not block.strip():
        return {}

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.warning(f"Invalid front matter: {e}")
        return {}

    return data if isinstance(data, dict) else {}
