"""Project Manager to resolve project roots and their analysis directories."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from analysis_viewer import config


class ProjectManager:
    """Resolves caller-supplied project paths against the configured default."""

    def __init__(self, default_project_path: str | Path):
        self._default_project_path = str(default_project_path)

    @property
    def default_project_path(self) -> str:
        return self._default_project_path

    def resolve_project_root(self, project_path: Optional[str] = None) -> Path:
        """Return the absolute project root for *project_path* (or the default)."""
        raw = (project_path or "").strip() or self._default_project_path
        return Path(raw).expanduser().resolve(strict=False)

    def get_analysis_dir(self, project_path: Optional[str] = None) -> Path:
        return analysis_dir_for(self.resolve_project_root(project_path))


def analysis_dir_for(project_root: Path) -> Path:
    return Path(project_root).joinpath(*config.ANALYSIS_DIR_PARTS)


# Global instance seeded from ANLVIEW_PROJECT_PATH (or the working directory)
project_manager = ProjectManager(config.PROJECT_PATH)
