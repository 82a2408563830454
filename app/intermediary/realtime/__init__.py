"""Realtime backend prompt and instruction assembly."""

from .instructions import build_backend_instructions, render_skills_section
from .prompt import REALTIME_BACKEND_PROMPT, PromptDocument, check_prompt, load_realtime_backend_prompt, read_prompt

__all__ = [
    "REALTIME_BACKEND_PROMPT",
    "PromptDocument",
    "build_backend_instructions",
    "check_prompt",
    "load_realtime_backend_prompt",
    "read_prompt",
    "render_skills_section",
]
