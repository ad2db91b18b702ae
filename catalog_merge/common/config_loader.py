"""
Configuration Loader

Loads the YAML pattern tables used by the attribute extractor: size
aliases, colour aliases, SKU colour codes and the display order of sizes.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

PATTERNS_FILE = 'attribute_patterns.yaml'

# Ordered (label, aliases) pairs
PatternTable = List[Tuple[str, List[str]]]


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'attribute_patterns.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def parse_pattern_table(entries: Optional[List[Dict[str, Any]]]) -> PatternTable:
    """
    Convert YAML table entries into ordered (label, aliases) pairs.

    Entries without a label are skipped. An entry without aliases
    matches on its own label.

    Args:
        entries: List of {'label': ..., 'aliases': [...]} mappings

    Returns:
        List of (label, aliases) tuples in file order

    Example:
        >>> parse_pattern_table([{'label': '2XL', 'aliases': ['2XL', 'XXL']}])
        [('2XL', ['2XL', 'XXL'])]
    """
    table = []
    for entry in entries or []:
        label = str(entry.get('label', '')).strip()
        if not label:
            continue
        aliases = [str(alias) for alias in entry.get('aliases') or [label]]
        table.append((label, aliases))
    return table


def load_size_patterns() -> PatternTable:
    """Load the ordered size table (most specific aliases first)."""
    config = load_config(PATTERNS_FILE)
    return parse_pattern_table(config.get('size_patterns'))


def load_color_patterns() -> PatternTable:
    """Load the ordered title colour table."""
    config = load_config(PATTERNS_FILE)
    return parse_pattern_table(config.get('color_patterns'))


def load_sku_color_codes() -> PatternTable:
    """Load the ordered SKU colour abbreviation table (e.g. BLK -> Black)."""
    config = load_config(PATTERNS_FILE)
    return parse_pattern_table(config.get('sku_color_codes'))


def load_size_order() -> List[str]:
    """
    Load the display order for size option values.

    Returns:
        List of size labels, smallest first

    Example:
        ['Extra Small', 'Small', 'Medium', 'Large', ...]
    """
    config = load_config(PATTERNS_FILE)
    return [str(size) for size in config.get('size_order', [])]
