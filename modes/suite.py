import logging
from dataclasses import dataclass, field
from typing import List, Optional

from analysis.classifier import Classifier, TestCase
from analysis.metrics import MetricsTimer, SuiteMetrics, compute_metrics
from grammar.cfg import ContextFreeGrammar
from grammar.extremes import ExtremeCaseGenerator
from grammar.generator import Derivation, DerivationEngine
from grammar.mutator import GrammarMutator


@dataclass
class SuiteResult:
    """Cases produced by one run, with their metrics"""
    grammar: ContextFreeGrammar
    cases: List[TestCase]
    metrics: SuiteMetrics
    derivations: List[Derivation] = field(default_factory=list)


def run_suite_mode(cfg, grammar: ContextFreeGrammar,
                   classifier: Optional[Classifier] = None) -> SuiteResult:
    """
    Generate a complete suite: valid, invalid and extreme cases.

    The first valid string seeds every invalid case. Identifiers restart at
    0001 for every suite.
    """
    logger = logging.getLogger("cfgcases.modes.suite")
    logger.info(
        f"Generating suite for '{grammar.name}': {cfg.valid_count} valid, "
        f"{cfg.invalid_count} invalid, {cfg.extreme_per_kind} extreme per kind (depth {cfg.max_depth})"
    )

    if classifier is None:
        classifier = Classifier(identifier=cfg.identifier)
    classifier.reset()

    engine = DerivationEngine(grammar, max_depth=cfg.max_depth, seed=cfg.seed)
    mutator = GrammarMutator(seed=cfg.seed, identifier=cfg.identifier)
    extremes = ExtremeCaseGenerator(grammar, depth_bound=cfg.max_depth, seed=cfg.seed)

    cases = []
    with MetricsTimer() as timer:
        derivations = engine.generate_derivations(cfg.valid_count)
        cases.extend(classifier.classify_valid_batch(derivations))

        if derivations and cfg.invalid_count > 0:
            mutations = mutator.generate_invalid(derivations[0].text, cfg.invalid_count)
            cases.extend(classifier.classify_invalid_batch(mutations))
        elif cfg.invalid_count > 0:
            logger.warning("No valid string was derived, skipping invalid cases")

        if cfg.extreme_per_kind > 0:
            cases.extend(classifier.classify_extreme_batch(extremes.generate_all(cfg.extreme_per_kind)))

    metrics = compute_metrics(cases, timer.elapsed_ms)
    logger.info(f"Suite complete: {metrics.total_cases} cases in {metrics.elapsed_ms:.2f} ms")
    return SuiteResult(grammar, cases, metrics, derivations)
