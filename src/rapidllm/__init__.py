"""Public exports for rapidllm."""

from .config import Settings, get_api_key, load_settings
from .main import CompletionClient, build_messages
from .prompts import resolve_prompt

__version__ = "0.1.0"
