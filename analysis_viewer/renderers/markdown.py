"""Split markdown discussion documents into frontmatter and a section tree."""
from __future__ import annotations

import logging
import re
from typing import Any

import yaml

from analysis_viewer.models import MarkdownDocumentView, MarkdownSection
from analysis_viewer.renderers.structured import render_json

logger = logging.getLogger("analysis_viewer.markdown")

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n?(.*)", re.DOTALL)
_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")


def split_frontmatter(text: str) -> tuple[dict[str, Any] | None, str]:
    """Separate a leading ``---`` YAML block from the discussion body.

    The block is always removed from the body when present. The mapping is
    ``None`` unless the block decodes to a non-empty YAML mapping, so callers
    can hand it straight to ``render_json``.
    """
    match = _FRONTMATTER_RE.match(text)
    if match is None:
        return None, text
    header, body = match.groups()
    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        logger.debug("Ignoring unparseable discussion frontmatter: %s", exc)
        return None, body
    if not isinstance(data, dict) or not data:
        return None, body
    return data, body


def _join_lines(lines: list[str]) -> str:
    return "\n".join(lines).strip("\n")


def build_sections(body: str) -> MarkdownSection:
    """Nest ATX headings by level under a level-0 root.

    Lines inside fenced code blocks are content, never headings. Text before
    the first heading stays on the root section.
    """
    root = MarkdownSection(level=0)
    stack: list[MarkdownSection] = [root]
    current = root
    current_lines: list[str] = []
    fence: str | None = None

    for line in body.split("\n"):
        fence_match = _FENCE_RE.match(line)
        if fence is not None:
            current_lines.append(line)
            if fence_match:
                marker = fence_match.group(1)
                if marker[0] == fence[0] and len(marker) >= len(fence) and not line.strip()[len(marker):].strip():
                    fence = None
            continue
        if fence_match:
            fence = fence_match.group(1)
            current_lines.append(line)
            continue

        heading = _HEADING_RE.match(line)
        if not heading:
            current_lines.append(line)
            continue

        current.content = _join_lines(current_lines)
        current_lines = []
        level = len(heading.group(1))
        while stack[-1].level >= level:
            stack.pop()
        section = MarkdownSection(title=heading.group(2).strip(), level=level)
        stack[-1].children.append(section)
        stack.append(section)
        current = section

    current.content = _join_lines(current_lines)
    return root


def render_markdown(text: str | None) -> MarkdownDocumentView:
    """Render a discussion document into frontmatter, preamble and sections."""
    if not text:
        return MarkdownDocumentView()
    normalized = text.replace("\r\n", "\n")
    frontmatter, body = split_frontmatter(normalized)
    root = build_sections(body)
    return MarkdownDocumentView(
        frontmatter=render_json(frontmatter) if frontmatter is not None else None,
        preamble=root.content,
        sections=root.children,
        text=body,
    )
