"""
Suite Metrics

Aggregates classified test cases into distribution, length, depth and
timing statistics.
"""

import time
import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from analysis.classifier import Category, TestCase
from grammar.extremes import ExtremeKind
from grammar.mutator import MutationKind
from grammar.tokens import OPERATORS


logger = logging.getLogger("cfgcases.analysis.metrics")


@dataclass
class SuiteMetrics:
    """Statistics for one generated suite"""
    total_cases: int = 0
    valid_cases: int = 0
    invalid_cases: int = 0
    extreme_cases: int = 0

    valid_percentage: float = 0.0
    invalid_percentage: float = 0.0
    extreme_percentage: float = 0.0

    avg_length: float = 0.0
    min_length: int = 0
    max_length: int = 0

    max_depth: int = 0
    avg_depth: float = 0.0

    operators_by_type: Dict[str, int] = field(default_factory=lambda: {op: 0 for op in OPERATORS})
    total_operators: int = 0

    mutations_by_kind: Dict[str, int] = field(default_factory=lambda: {k.value: 0 for k in MutationKind})
    extremes_by_kind: Dict[str, int] = field(default_factory=lambda: {k.value: 0 for k in ExtremeKind})

    elapsed_ms: float = 0.0
    ms_per_case: float = 0.0

    category_stats: Dict[str, Dict] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return asdict(self)


class MetricsTimer:
    """Stopwatch for a generation run"""

    def __init__(self):
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def start(self):
        self.start_time = time.perf_counter()
        self.end_time = None

    def stop(self):
        if self.start_time is None:
            raise RuntimeError("Timer was never started")
        self.end_time = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        """Elapsed milliseconds (up to now if still running)"""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return (end - self.start_time) * 1000

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False


def _percentage(part: int, total: int) -> float:
    return round(part * 100.0 / total, 2) if total else 0.0


def _average(values: List[int]) -> float:
    return round(sum(values) / len(values), 2) if values else 0.0


def compute_metrics(cases: List[TestCase], elapsed_ms: float = 0.0) -> SuiteMetrics:
    """
    Compute suite metrics from classified cases.

    Args:
        cases: Classified test cases
        elapsed_ms: Wall time of the generation run

    Returns:
        SuiteMetrics (all zeros for an empty list)
    """
    metrics = SuiteMetrics()
    if not cases:
        return metrics

    by_category = defaultdict(list)
    for case in cases:
        by_category[case.category].append(case)

    metrics.total_cases = len(cases)
    metrics.valid_cases = len(by_category[Category.VALID])
    metrics.invalid_cases = len(by_category[Category.INVALID])
    metrics.extreme_cases = len(by_category[Category.EXTREME])

    metrics.valid_percentage = _percentage(metrics.valid_cases, metrics.total_cases)
    metrics.invalid_percentage = _percentage(metrics.invalid_cases, metrics.total_cases)
    metrics.extreme_percentage = _percentage(metrics.extreme_cases, metrics.total_cases)

    lengths = [c.metadata['token_count'] for c in cases if 'token_count' in c.metadata]
    if lengths:
        metrics.avg_length = _average(lengths)
        metrics.min_length = min(lengths)
        metrics.max_length = max(lengths)

    depths = [c.metadata['depth'] for c in cases if 'depth' in c.metadata]
    if depths:
        metrics.max_depth = max(depths)
        metrics.avg_depth = _average(depths)

    for case in cases:
        for op, count in case.metadata.get('operators', {}).items():
            if op in metrics.operators_by_type:
                metrics.operators_by_type[op] += count
    metrics.total_operators = sum(metrics.operators_by_type.values())

    for case in by_category[Category.INVALID]:
        kind = case.metadata.get('mutation_kind')
        if kind in metrics.mutations_by_kind:
            metrics.mutations_by_kind[kind] += 1

    for case in by_category[Category.EXTREME]:
        kind = case.metadata.get('extreme_kind')
        if kind in metrics.extremes_by_kind:
            metrics.extremes_by_kind[kind] += 1

    metrics.elapsed_ms = round(elapsed_ms, 2)
    metrics.ms_per_case = round(elapsed_ms / metrics.total_cases, 2)

    for category in Category:
        metrics.category_stats[category.value] = category_statistics(by_category[category])

    logger.debug(
        f"Computed metrics for {metrics.total_cases} cases "
        f"({metrics.valid_cases} valid, {metrics.invalid_cases} invalid, {metrics.extreme_cases} extreme)"
    )
    return metrics


def category_statistics(cases: List[TestCase]) -> Dict:
    """Token and operator statistics for the cases of one category."""
    tokens = [c.metadata.get('token_count', 0) for c in cases]
    operators = [c.metadata.get('total_operators', 0) for c in cases]
    unbalanced = sum(1 for c in cases if not c.metadata.get('parens_balanced', True))

    return {
        'count': len(cases),
        'avg_tokens': _average(tokens),
        'max_tokens': max(tokens) if tokens else 0,
        'avg_operators': _average(operators),
        'unbalanced_parens': unbalanced,
    }
