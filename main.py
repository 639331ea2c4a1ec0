# cfgcases/main.py
import argparse
import logging
import sys

from logger import setup_logger, parse_log_level, DEFAULT_LOG_FILE, LOG_LEVELS
from config import GeneratorConfig, ConfigError
from analysis.report_generator import ReportGenerator
from grammar.builtin_grammars import BuiltinGrammars
from grammar.errors import GrammarError
from grammar.extremes import ExtremeKind
from grammar.grammar_parser import GrammarParser
from modes.suite import run_suite_mode
from modes.single import run_derive_mode, run_invalid_mode, run_extreme_mode
import tui


def load_grammar(cfg):
    """Parse the grammar file if one is configured, otherwise load the built-in grammar."""
    if cfg.grammar_file:
        return GrammarParser().load(cfg.grammar_file)
    return BuiltinGrammars.load(cfg.grammar)


def print_result(result, show_traces: bool = False):
    """Plain console output (used without --tui)."""
    if show_traces:
        for derivation in result.derivations:
            print(f"\n{derivation.text}")
            for i, step in enumerate(derivation.steps):
                print(f"  Step {i}: {step}")
        print()
    for case in result.cases:
        print(f"{case.id:14s} {case.content}")
    print()
    print(ReportGenerator().generate_summary(result.metrics))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="cfgcases: valid, invalid and extreme test strings from a context-free grammar"
    )
    parser.add_argument("--mode", choices=["suite", "derive", "invalid", "extreme", "grammar"], default="suite",
                        help="suite (all categories), derive (valid strings with traces), invalid, extreme, "
                             "or grammar (show the grammar only).")
    parser.add_argument("--grammar", default=None, choices=BuiltinGrammars.list_grammars(),
                        help="Built-in grammar to use (default: arithmetic).")
    parser.add_argument("--grammar-file", default=None,
                        help="Path to a grammar text file (one 'A -> B C' production per line).")
    parser.add_argument("--list-grammars", action="store_true", help="List the built-in grammars and exit.")
    parser.add_argument("--valid", type=int, default=None, help="Number of valid strings to derive (default 5).")
    parser.add_argument("--invalid", type=int, default=None, help="Number of invalid strings to generate (default 5).")
    parser.add_argument("--extreme", type=int, default=None, help="Extreme cases per kind (default 1).")
    parser.add_argument("--kind", action="append", choices=[k.value for k in ExtremeKind],
                        help="Extreme kind to generate in extreme mode (repeatable, default all).")
    parser.add_argument("--input", default=None, help="Valid string to mutate in invalid mode.")
    parser.add_argument("--depth", type=int, default=None, help="Maximum derivation depth (default 20).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs.")
    parser.add_argument("--identifier", default=None, help="Identifier spelling counted in metadata (default 'id').")
    parser.add_argument("--export", nargs="?", const="", default=None, metavar="PATH",
                        help="Export the cases as JSON (timestamped file in the output dir when PATH is omitted).")
    parser.add_argument("--report", action="store_true",
                        help="Save text, JSON and markdown reports in the output dir.")
    parser.add_argument("--output-dir", default=None, help="Directory for reports and exports.")
    parser.add_argument("--config-dir", default=None,
                        help="Directory holding config.json (default ~/.cfgcases/).")
    parser.add_argument("--save-config", action="store_true", help="Persist the effective settings to config.json.")
    parser.add_argument("--log-level", default=None, choices=LOG_LEVELS,
                        help="Set the logging level.")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="Rotating log file location.")
    parser.add_argument("--quiet", action="store_true",
                        help="Minimize console output (overrides log-level to WARNING).")
    parser.add_argument("--tui", action="store_true", help="Render the results with rich tables and panels.")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.list_grammars:
        for name in BuiltinGrammars.list_grammars():
            print(name)
        return

    # 1) Load configuration
    try:
        cfg = GeneratorConfig.load(args.config_dir)
    except ConfigError as e:
        setup_logger(logging.ERROR, log_to_file=False, log_to_console=True).error(f"Failed to load config: {e}")
        sys.exit(1)

    # 2) Configure logging
    log_level = parse_log_level(args.log_level or cfg.log_level)
    if args.quiet:
        log_level = logging.WARNING
    logger = setup_logger(log_level, log_to_console=True, log_file=args.log_file)
    logger.info(f"Starting cfgcases in '{args.mode}' mode...")

    # Override config with CLI args if provided
    cfg.update(
        valid_count=args.valid,
        invalid_count=args.invalid,
        extreme_per_kind=args.extreme,
        max_depth=args.depth,
        seed=args.seed,
        identifier=args.identifier,
        grammar=args.grammar,
        grammar_file=args.grammar_file,
        output_dir=args.output_dir,
    )
    if args.grammar and not args.grammar_file:
        cfg.grammar_file = None
    if args.tui:
        cfg.tui = True

    try:
        cfg.validate()
        if args.save_config:
            logger.info(f"Saved configuration to {cfg.save()}")
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    # 3) Load the grammar
    try:
        grammar = load_grammar(cfg)
    except (GrammarError, FileNotFoundError) as e:
        logger.error(f"Failed to load grammar: {e}")
        sys.exit(1)

    if args.mode == "grammar":
        if cfg.tui:
            tui.render_grammar(grammar)
        else:
            print(grammar.describe())
        return

    # 4) Dispatch to the appropriate mode
    try:
        if args.mode == "suite":
            result = run_suite_mode(cfg, grammar)
        elif args.mode == "derive":
            result = run_derive_mode(cfg, grammar)
        elif args.mode == "invalid":
            result = run_invalid_mode(cfg, grammar, source=args.input)
        else:
            kinds = [ExtremeKind(k) for k in args.kind] if args.kind else None
            result = run_extreme_mode(cfg, grammar, kinds=kinds)
    except GrammarError as e:
        logger.error(f"Error running {args.mode} mode: {e}")
        sys.exit(1)

    show_traces = args.mode == "derive"
    if cfg.tui:
        tui.render_result(result, show_traces=show_traces)
    else:
        print_result(result, show_traces=show_traces)

    # 5) Reports and export
    reports = ReportGenerator(cfg.output_dir)
    try:
        if args.export is not None:
            path = reports.export_json(result.cases, result.metrics, grammar,
                                       configuration=cfg.to_dict(), path=args.export or None)
            print(f"Exported {len(result.cases)} cases to {path}")
        if args.report:
            for fmt, path in reports.save_report(result.cases, result.metrics, grammar).items():
                print(f"Saved {fmt} report to {path}")
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        sys.exit(1)

    logger.info("cfgcases has finished execution. Goodbye!")


if __name__ == "__main__":
    main()
