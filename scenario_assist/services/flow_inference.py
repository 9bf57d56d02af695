"""
Keyword-based flow inference.

A heuristic, not a classifier: each flow in the pattern table scores one
point per pattern found in the scenario text, and the best flow wins if
it reaches the minimum match count. The table is data (YAML) so new
flows can be added without touching the scoring.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Pattern
import yaml

from scenario_assist.models.actions import RecordedAction
from scenario_assist.services.step_labels import normalize_text
from scenario_assist.utils.config import settings

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS_FILE = Path(__file__).resolve().parent.parent / "data" / "flow_patterns.yaml"


@dataclass
class FlowSignal:
    """Keyword patterns identifying one user journey."""
    label: str
    patterns: List[Pattern] = field(default_factory=list)

    def score(self, text: str) -> int:
        return sum(1 for pattern in self.patterns if pattern.search(text))


@dataclass
class FlowPatternTable:
    """Loaded flow signals plus scoring thresholds."""
    signals: List[FlowSignal]
    min_matches: int = 2
    min_actions: int = 4


class FlowPatternLoader:
    """Loads the flow pattern table from YAML."""

    def __init__(self, patterns_file: Optional[str] = None):
        self.patterns_file = Path(patterns_file) if patterns_file else None

    def load(self) -> FlowPatternTable:
        """Load the configured table, falling back to the packaged one."""
        if self.patterns_file is not None:
            try:
                table = self._load_file(self.patterns_file)
                logger.info(f"Loaded {len(table.signals)} flow signals from {self.patterns_file}")
                return table
            except (OSError, yaml.YAMLError, ValueError, re.error) as e:
                logger.error(f"Failed to load flow patterns from {self.patterns_file}: {e}")

        return self._load_file(DEFAULT_PATTERNS_FILE)

    def _load_file(self, file_path: Path) -> FlowPatternTable:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or not isinstance(data.get('flows'), list):
            raise ValueError(f"{file_path}: expected a mapping with a 'flows' list")

        signals = []
        for entry in data['flows']:
            if not isinstance(entry, dict) or not entry.get('label'):
                raise ValueError(f"{file_path}: every flow needs a label")
            signals.append(FlowSignal(
                label=str(entry['label']),
                patterns=[re.compile(str(p)) for p in entry.get('patterns') or []],
            ))

        return FlowPatternTable(
            signals=signals,
            min_matches=int(data.get('min_matches', 2)),
            min_actions=int(data.get('min_actions', 4)),
        )


_pattern_table: Optional[FlowPatternTable] = None


def get_flow_pattern_table() -> FlowPatternTable:
    """Get the process-wide flow pattern table, loading it once."""
    global _pattern_table
    if _pattern_table is None:
        _pattern_table = FlowPatternLoader(settings.FLOW_PATTERNS_FILE).load()
    return _pattern_table


def infer_flow_from_text(
    actions: List[RecordedAction],
    table: Optional[FlowPatternTable] = None
) -> Optional[str]:
    """
    Guess the flow label for a scenario.

    Args:
        actions: Steps whose descriptions and values are scored
        table: Pattern table; defaults to the configured one

    Returns:
        Winning flow label, or None for short scenarios and weak signals
    """
    table = table or get_flow_pattern_table()
    if len(actions) < table.min_actions:
        return None

    joined = normalize_text(" ".join(f"{a.description} {a.value or ''}" for a in actions))

    best_label = None
    best_score = 0
    for signal in table.signals:
        score = signal.score(joined)
        if score > best_score:
            best_score = score
            best_label = signal.label

    if best_score >= table.min_matches:
        return best_label
    return None
