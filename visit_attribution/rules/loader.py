from pathlib import Path

import yaml
from pydantic import ValidationError

from visit_attribution.core.errors import RulesError
from visit_attribution.core.services.config import DEFAULT_CONFIG, AttributionConfig
from visit_attribution.rules.models import Rules


def _strip_code_fence(content: str) -> str:
    """Return the first ```yaml block if there is one, else the whole text."""
    yaml_lines = []
    in_block = False
    found_block = False

    for line in content.splitlines():
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break

        if in_block:
            yaml_lines.append(line)

    if found_block:
        return "\n".join(yaml_lines)
    return content


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises RulesError if the file is missing, not YAML, or fails the schema.
    """
    if not path.exists():
        raise RulesError(f"Rules file not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(_strip_code_fence(content))
    except yaml.YAMLError as e:
        raise RulesError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise RulesError(f"Rules validation failed:\n{e}") from e


def load_config(path: Path | None = None) -> AttributionConfig:
    """Load attribution configuration; the built-in defaults when path is None."""
    if path is None:
        return DEFAULT_CONFIG
    return AttributionConfig.from_rules(load_rules(path))
