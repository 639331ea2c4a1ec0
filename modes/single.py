import logging
from typing import List, Optional

from analysis.classifier import Classifier
from analysis.metrics import MetricsTimer, compute_metrics
from grammar.cfg import ContextFreeGrammar
from grammar.errors import DepthExceeded
from grammar.extremes import ExtremeCaseGenerator, ExtremeKind
from grammar.generator import Derivation, DerivationEngine
from grammar.mutator import GrammarMutator
from modes.suite import SuiteResult

SEED_ATTEMPTS = 10


def derive_seed_string(engine: DerivationEngine) -> Derivation:
    """Derive one valid string, retrying attempts that hit the depth bound."""
    for _ in range(SEED_ATTEMPTS):
        derivation = engine.attempt()
        if derivation is not None:
            return derivation
    raise DepthExceeded(
        engine.max_depth,
        f"No valid string derived in {SEED_ATTEMPTS} attempts (depth {engine.max_depth})",
    )


def run_derive_mode(cfg, grammar: ContextFreeGrammar, count: Optional[int] = None) -> SuiteResult:
    """Derive valid strings and keep their traces."""
    logger = logging.getLogger("cfgcases.modes.single")
    count = cfg.valid_count if count is None else count
    logger.info(f"Deriving {count} strings from '{grammar.name}' (depth {cfg.max_depth})")

    classifier = Classifier(identifier=cfg.identifier)
    engine = DerivationEngine(grammar, max_depth=cfg.max_depth, seed=cfg.seed)

    with MetricsTimer() as timer:
        derivations = engine.generate_derivations(count)
        cases = classifier.classify_valid_batch(derivations)

    return SuiteResult(grammar, cases, compute_metrics(cases, timer.elapsed_ms), derivations)


def run_invalid_mode(cfg, grammar: ContextFreeGrammar, source: Optional[str] = None) -> SuiteResult:
    """
    Mutate one valid string into invalid cases.

    Args:
        cfg: Generator configuration
        grammar: Grammar used to derive the seed string when source is not given
        source: Valid string to mutate

    Raises:
        DepthExceeded: If no seed string could be derived
    """
    logger = logging.getLogger("cfgcases.modes.single")
    classifier = Classifier(identifier=cfg.identifier)
    mutator = GrammarMutator(seed=cfg.seed, identifier=cfg.identifier)

    derivations = []
    with MetricsTimer() as timer:
        if source is None:
            engine = DerivationEngine(grammar, max_depth=cfg.max_depth, seed=cfg.seed)
            derivations.append(derive_seed_string(engine))
            source = derivations[0].text
        logger.info(f"Mutating '{source}' into {cfg.invalid_count} invalid cases")

        cases = classifier.classify_invalid_batch(mutator.generate_invalid(source, cfg.invalid_count))

    return SuiteResult(grammar, cases, compute_metrics(cases, timer.elapsed_ms), derivations)


def run_extreme_mode(cfg, grammar: ContextFreeGrammar,
                     kinds: Optional[List[ExtremeKind]] = None) -> SuiteResult:
    """Generate extreme cases, every kind unless kinds is given."""
    logger = logging.getLogger("cfgcases.modes.single")
    classifier = Classifier(identifier=cfg.identifier)
    generator = ExtremeCaseGenerator(grammar, depth_bound=cfg.max_depth, seed=cfg.seed)

    results = []
    with MetricsTimer() as timer:
        if kinds is None:
            results = generator.generate_all(cfg.extreme_per_kind)
        else:
            for kind in kinds:
                for _ in range(cfg.extreme_per_kind):
                    try:
                        results.append(generator.generate(kind))
                    except DepthExceeded as e:
                        logger.warning(f"Skipping {kind.value} case: {e}")
        cases = classifier.classify_extreme_batch(results)

    logger.info(f"Generated {len(cases)} extreme cases for '{grammar.name}'")
    return SuiteResult(grammar, cases, compute_metrics(cases, timer.elapsed_ms))
