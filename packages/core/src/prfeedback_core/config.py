import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "output_dir": ".",
    "bot_patterns": [],  # extra login substrings treated as bots, on top of the built-in list
    "include_diff": False,
    "max_patch_chars": 20000,
}


def load_config(config_path: str = ".prfeedback.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prfeedback.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "bot_patterns": list(DEFAULT_CONFIG["bot_patterns"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["bot_patterns"] = _pattern_list(config.get("bot_patterns"))
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


def _pattern_list(value) -> list:
    """Accept a single pattern or a list of them; None means no extra patterns."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(p) for p in value]
    raise ValueError(f"bot_patterns must be a string or a list of strings, got: {value!r}")


def default_output_path(pr_number: int, config: dict) -> Path:
    """Return <output_dir>/pr-<number>.md."""
    return Path(config.get("output_dir") or ".") / f"pr-{pr_number}.md"
