"""Skill discovery under plugin skill roots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .plugins import plugin_namespace_for_skill_path

logger = logging.getLogger(__name__)

SKILL_FILE_NAME = "SKILL.md"


@dataclass(frozen=True)
class SkillInfo:
    name: str
    description: str
    path: Path
    namespace: str | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}:{self.name}" if self.namespace else self.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "qualified_name": self.qualified_name,
            "description": self.description,
            "path": str(self.path),
            "namespace": self.namespace,
        }


def _parse_frontmatter(text: str) -> dict[str, str]:
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}
    result: dict[str, str] = {}
    for line in lines[1:]:
        if line.strip() == "---":
            return result
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        result[key.strip()] = value
    # unterminated frontmatter
    return {}


def load_skill(skill_file: Path) -> SkillInfo | None:
    try:
        text = skill_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read skill %s: %s", skill_file, exc)
        return None
    meta = _parse_frontmatter(text)
    description = meta.get("description", "").strip()
    if not description:
        logger.warning("Skipping skill %s: missing description", skill_file)
        return None
    return SkillInfo(
        name=meta.get("name", "").strip() or skill_file.parent.name,
        description=description,
        path=skill_file.resolve(),
        namespace=plugin_namespace_for_skill_path(skill_file),
    )


def discover_skills(roots: list[Path]) -> list[SkillInfo]:
    """Load every ``<root>/<skill>/SKILL.md`` in root order, then by directory name."""
    skills: list[SkillInfo] = []
    seen: set[Path] = set()
    for root in roots:
        if not root.is_dir():
            continue
        for d in sorted(root.iterdir()):
            skill_file = d / SKILL_FILE_NAME
            if not d.is_dir() or not skill_file.is_file():
                continue
            resolved = skill_file.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            info = load_skill(skill_file)
            if info is not None:
                skills.append(info)
    return skills
