"""Pydantic models matching the frontend TypeScript types."""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SessionStatus = Literal["in_progress", "completed"]


# ── Analysis session models ────────────────────────────────────────

class AnalysisSessionSummary(BaseModel):
    id: str
    name: str
    topic: str
    createdAt: str
    status: SessionStatus = "in_progress"
    hasConclusions: bool = False


class AnalysisSessionDetail(BaseModel):
    id: str
    name: str
    topic: str
    createdAt: str
    status: SessionStatus = "in_progress"
    hasConclusions: bool = False
    discussion: Optional[str] = None
    conclusions: Optional[dict[str, Any]] = None
    explorations: Optional[dict[str, Any]] = None
    perspectives: Optional[dict[str, Any]] = None


class SessionListResponse(BaseModel):
    success: bool = True
    data: list[AnalysisSessionSummary] = Field(default_factory=list)
    total: int = 0


class SessionDetailResponse(BaseModel):
    success: bool = True
    data: AnalysisSessionDetail


# ── Artifact schemas (consumed, not produced) ──────────────────────

class ConclusionsHeader(BaseModel):
    """Fields of ``conclusions.json`` the viewer reads.

    Everything is optional and unknown keys are kept; a document that does not
    fit this shape is still displayed, it just contributes no topic.
    """

    model_config = ConfigDict(extra="allow")

    session_id: Optional[str] = None
    topic: Optional[str] = None
    completed: Optional[str] = None
    total_rounds: Optional[int] = None
    summary: Optional[str] = None
    key_conclusions: list[Any] = Field(default_factory=list)
    recommendations: list[Any] = Field(default_factory=list)
    open_questions: list[Any] = Field(default_factory=list)


# ── Render tree models ─────────────────────────────────────────────
#
# Render trees are sent as a flat node table so that serialisation depth does
# not grow with the nesting depth of the rendered document.

class RenderNode(BaseModel):
    id: int
    parentId: Optional[int] = None
    kind: str  # "empty" | "boolean" | "number" | "link" | "long_text" | "text" | "empty_list" | "badges" | "list" | "empty_object" | "object"
    label: Optional[str] = None
    key: Optional[str] = None
    index: Optional[int] = None  # 1-based position inside an indexed list
    depth: int = 0
    value: Any = None
    text: str = ""
    items: list[str] = Field(default_factory=list)
    expanded: Optional[bool] = None
    count: int = 0
    childIds: list[int] = Field(default_factory=list)


class RenderTree(BaseModel):
    rootId: int = 0
    nodes: list[RenderNode] = Field(default_factory=list)  # nodes[i].id == i

    @property
    def root(self) -> RenderNode:
        return self.nodes[self.rootId]

    def node(self, node_id: int) -> RenderNode:
        return self.nodes[node_id]

    def children(self, node: RenderNode) -> list[RenderNode]:
        return [self.nodes[child_id] for child_id in node.childIds]


class MarkdownSection(BaseModel):
    title: str = ""
    level: int = 0  # 0 for the document root / preamble holder
    content: str = ""
    children: list[MarkdownSection] = Field(default_factory=list)


class MarkdownDocumentView(BaseModel):
    frontmatter: Optional[RenderTree] = None
    preamble: str = ""
    sections: list[MarkdownSection] = Field(default_factory=list)
    text: str = ""


class SessionViewTab(BaseModel):
    id: str  # "discussion" | "conclusions" | "explorations" | "perspectives"
    label: str
    format: str  # "markdown" | "structured"
    document: Optional[MarkdownDocumentView] = None
    tree: Optional[RenderTree] = None


class AnalysisSessionView(BaseModel):
    id: str
    topic: str
    createdAt: str
    status: SessionStatus = "in_progress"
    tabs: list[SessionViewTab] = Field(default_factory=list)
    defaultTab: Optional[str] = None
