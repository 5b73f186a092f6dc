"""
Loading of parameter descriptions (per-attribute help and validation rules)
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from models import ParameterDescription

DEFAULT_DESCRIPTIONS_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "config", "parameter_descriptions.json"
)


@dataclass
class DescriptionsLoadResult:
    """Descriptions from the first source that could be read"""
    descriptions: Dict[str, ParameterDescription] = field(default_factory=dict)
    source: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def is_loaded(self) -> bool:
        return self.source is not None

    def get_status_text(self) -> str:
        """Status line for the descriptions indicator"""
        if self.is_loaded:
            return f"Parameter descriptions loaded from {self.source} ({len(self.descriptions)} parameters)"
        if self.errors:
            return self.errors[-1]
        return "No parameter descriptions configured"


def parse_parameter_descriptions(data: Dict[str, Any]) -> Dict[str, ParameterDescription]:
    """Convert the raw JSON mapping; entries that are not objects are skipped"""
    descriptions = {}
    for name, raw in data.items():
        if isinstance(raw, dict):
            descriptions[str(name)] = ParameterDescription.from_dict(raw)
    return descriptions


def read_descriptions_file(file_path: str) -> Dict[str, ParameterDescription]:
    """Read one JSON descriptions file.

    Raises:
        OSError: the file cannot be read
        ValueError: the file is not a JSON object
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("descriptions file must contain a JSON object")
    return parse_parameter_descriptions(data)


def load_parameter_descriptions(sources: Sequence[str] = (),
                                include_default: bool = True) -> DescriptionsLoadResult:
    """Load descriptions from the first usable source.

    Sources are tried in order; the bundled default file is tried last unless
    ``include_default`` is False.
    """
    candidates = [s for s in sources if s]
    if include_default and DEFAULT_DESCRIPTIONS_PATH not in candidates:
        candidates.append(DEFAULT_DESCRIPTIONS_PATH)

    result = DescriptionsLoadResult()
    for source in candidates:
        try:
            result.descriptions = read_descriptions_file(source)
            result.source = source
            return result
        except (OSError, ValueError) as e:
            message = f"Failed to load parameter descriptions from {source}: {e}"
            print(message)
            result.errors.append(message)

    return result
