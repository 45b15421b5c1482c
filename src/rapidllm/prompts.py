"""Resolve the `--prompt` argument into a system message.

A prompt argument is tried, in order, as:

1. the name of a directory under the prompts root holding a `system.md`,
2. a path to a readable file,
3. the system message itself.

The first two tiers are probes returning the message or `None`; the first hit
wins, and the argument itself is the fallback.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from rapidllm.errors import PromptReadError
from rapidllm.logger import logger

SYSTEM_PROMPT_FILENAME = "system.md"

PromptProbe = Callable[[str], "str | None"]


def read_verbatim(path: Path) -> str:
    """Read a UTF-8 file without newline translation or trimming."""
    return path.read_bytes().decode("utf-8")


def is_prompt_name(prompt_arg: str) -> bool:
    """Whether `prompt_arg` is a single path component that stays inside the prompts root."""
    return bool(prompt_arg) and os.sep not in prompt_arg and "/" not in prompt_arg and prompt_arg not in (".", "..")


def probe_prompts_root(prompt_arg: str, prompts_root: Path) -> str | None:
    if not is_prompt_name(prompt_arg):
        return None

    path = prompts_root / prompt_arg / SYSTEM_PROMPT_FILENAME
    try:
        if not path.is_file():
            return None
        content = read_verbatim(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Ignoring prompt {path}: {exc}")
        return None

    logger.debug(f"Using system prompt from {path}")
    return content


def probe_file(prompt_arg: str) -> str | None:
    path = Path(prompt_arg)
    try:
        path = path.expanduser()
        if not path.is_file():
            return None
    except (OSError, RuntimeError) as exc:
        # RuntimeError: a leading "~" that names no known user.
        logger.debug(f"Could not stat {path}: {exc}")
        return None

    try:
        content = read_verbatim(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise PromptReadError(f"Could not read {path}: {exc}") from exc

    logger.debug(f"Using system prompt from file {path}")
    return content


def prompt_probes(prompts_root: Path) -> list[PromptProbe]:
    """Return the file-backed tiers in priority order. The literal value is the fallback."""
    return [
        lambda arg: probe_prompts_root(arg, prompts_root),
        probe_file,
    ]


def resolve_prompt(prompt_arg: str | None, prompts_root: Path) -> str | None:
    """Turn a `--prompt` value into system message text.

    Args:
        prompt_arg: The flag value, or None when the flag was not given.
        prompts_root: Directory holding named prompts, usually `~/.config/rapidllm/prompts`.

    Returns:
        The system message, or None when no prompt was requested.

    Raises:
        PromptReadError: If `prompt_arg` names an existing file that cannot be read.
    """
    if prompt_arg is None:
        return None

    for probe in prompt_probes(prompts_root):
        if (content := probe(prompt_arg)) is not None:
            return content

    return prompt_arg
