from functools import lru_cache
from pathlib import Path
from typing import Optional


@lru_cache(maxsize=1)
def load_system_prompt() -> str:
    p = Path(__file__).resolve().parents[1] / "prompts" / "code_system.txt"
    return p.read_text(encoding="utf-8").strip()


def build_system_prompt(system_prompt: Optional[str] = None, file_contents: Optional[str] = None) -> str:
    """
    Fixed code-generation rules, then the caller's own system text,
    then the current project files when the caller sent them.
    """
    prompt = f"{load_system_prompt()}\n\n{system_prompt or ''}"
    if file_contents:
        prompt += f"\n\nCurrent project files:\n{file_contents}"
    return prompt
