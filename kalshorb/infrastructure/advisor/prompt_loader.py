"""
Prompt loader for LLM mode.

Loads the advisor persona, closing line and quick-action prompts
from YAML configuration. Falls back to the built-in defaults when
the file is missing or malformed.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from kalshorb.domain.advisor.prompts import PromptSet

logger = logging.getLogger(__name__)

DEFAULT_PROMPTS_PATH = Path(__file__).parent / "prompts.yaml"


class PromptLoader:
    """Load and manage advisor prompts from YAML."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize prompt loader.

        Args:
            config_path: Path to prompts.yaml file
        """
        self.config_path = Path(config_path) if config_path else DEFAULT_PROMPTS_PATH
        self.prompts = self._load_prompts()

    def _load_prompts(self) -> dict[str, Any]:
        """Load prompts from YAML file."""
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                prompts = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load prompts from %s: %s", self.config_path, e)
            return {}

        if not isinstance(prompts, dict):
            logger.error("Prompt file %s is not a mapping", self.config_path)
            return {}

        logger.info("Loaded prompts from %s", self.config_path)
        return prompts

    def prompt_set(self) -> PromptSet:
        """
        Build a PromptSet, using defaults for any missing entry.

        Returns:
            PromptSet for the chat and quick action use cases
        """
        defaults = PromptSet()
        chat = self.prompts.get("chat") or {}
        quick = self.prompts.get("quick_actions") or {}

        quick_actions = dict(defaults.quick_actions)
        for action_id, prompt in (quick.get("prompts") or {}).items():
            if isinstance(prompt, str) and prompt.strip():
                quick_actions[str(action_id)] = prompt.strip()

        return PromptSet(
            persona=_text(chat.get("persona"), defaults.persona),
            closing=_text(chat.get("closing"), defaults.closing),
            quick_action_system=_text(quick.get("system"), defaults.quick_action_system),
            quick_actions=quick_actions,
        )


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


# Global prompt loader instance
_prompt_loader = None


def get_prompt_loader() -> PromptLoader:
    """Get global prompt loader instance."""
    global _prompt_loader
    if _prompt_loader is None:
        _prompt_loader = PromptLoader()
    return _prompt_loader
