"""Instruction block handed to the Realtime backend model."""

from __future__ import annotations

import logging

from ..registries.plugins import PluginLoadOutcome
from ..registries.skills import SkillInfo, discover_skills
from .prompt import TEMPLATES_DIR, load_realtime_backend_prompt

logger = logging.getLogger(__name__)

_SKILLS_SECTION_TEMPLATE: str = (TEMPLATES_DIR / "fragments" / "skills_section.md").read_text(
    encoding="utf-8"
)


def render_skills_section(skills: list[SkillInfo]) -> str:
    if not skills:
        return ""
    lines = "\n".join(
        f"- {s.qualified_name}: {s.description} (file: {s.path.as_posix()})" for s in skills
    )
    return _SKILLS_SECTION_TEMPLATE.format(skills=lines).rstrip() + "\n"


def skills_for_outcome(outcome: PluginLoadOutcome) -> list[SkillInfo]:
    return discover_skills(outcome.effective_skill_roots())


def build_backend_instructions(
    prompt: str | None = None,
    skills: list[SkillInfo] | None = None,
) -> str:
    """Return the backend prompt, followed by a skills section when plugins add skills."""
    base = load_realtime_backend_prompt() if prompt is None else prompt
    section = render_skills_section(skills or [])
    if not section:
        return base
    logger.debug("Appending %d plugin skill(s) to backend instructions", len(skills or []))
    return f"{base.rstrip()}\n\n{section}"
