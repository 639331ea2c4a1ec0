"""
Test Suite Report Generator

Generates suite reports in multiple formats:
- Text reports
- Short summaries
- Markdown reports
- JSON export (for loading into other test harnesses)
"""

import os
import json
import logging
from datetime import datetime
from typing import Dict, List, Optional

from analysis.classifier import Category, TestCase
from analysis.metrics import SuiteMetrics
from grammar.cfg import ContextFreeGrammar


logger = logging.getLogger("cfgcases.analysis.report")

VERSION = "0.1.0"

CATEGORY_LABELS = {
    Category.VALID: "Valid",
    Category.INVALID: "Invalid",
    Category.EXTREME: "Extreme",
}


def _section(lines: List[str], title: str):
    lines.append("=" * 80)
    lines.append(title)
    lines.append("=" * 80)
    lines.append("")


def timestamped_filename(prefix: str, extension: str) -> str:
    """Build a file name like suite_20240101_120000.json"""
    return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.{extension}"


class ReportGenerator:
    """Generate formatted test suite reports"""

    def __init__(self, output_dir: str = "~/.cfgcases/reports"):
        self.output_dir = os.path.expanduser(output_dir)

    def generate_text_report(self, cases: List[TestCase], metrics: SuiteMetrics,
                             grammar: Optional[ContextFreeGrammar] = None) -> str:
        """Generate detailed text report"""
        lines = []
        lines.append("=" * 80)
        lines.append("CFGCASES TEST SUITE REPORT")
        lines.append("=" * 80)
        lines.append("")
        lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        if grammar is not None:
            lines.append(f"Grammar: {grammar.name} (start symbol {grammar.start})")
        lines.append("")

        if grammar is not None:
            _section(lines, "GRAMMAR")
            for production in grammar.productions:
                lines.append(f"  {production}")
            lines.append("")

        _section(lines, "SUMMARY")
        lines.append(f"Total Cases: {metrics.total_cases}")
        lines.append(f"Execution Time: {metrics.elapsed_ms:.2f} ms")
        lines.append(f"Time per Case: {metrics.ms_per_case:.2f} ms")
        lines.append("")

        _section(lines, "CATEGORY DISTRIBUTION")
        lines.append(f"  Valid   : {metrics.valid_cases:5d} ({metrics.valid_percentage:5.1f}%)")
        lines.append(f"  Invalid : {metrics.invalid_cases:5d} ({metrics.invalid_percentage:5.1f}%)")
        lines.append(f"  Extreme : {metrics.extreme_cases:5d} ({metrics.extreme_percentage:5.1f}%)")
        lines.append("")

        _section(lines, "LENGTH STATISTICS (tokens)")
        lines.append(f"  Average: {metrics.avg_length:.2f}")
        lines.append(f"  Minimum: {metrics.min_length}")
        lines.append(f"  Maximum: {metrics.max_length}")
        lines.append("")

        if metrics.max_depth > 0:
            _section(lines, "DEPTH STATISTICS")
            lines.append(f"  Maximum: {metrics.max_depth}")
            lines.append(f"  Average: {metrics.avg_depth:.2f}")
            lines.append("")

        _section(lines, "OPERATORS")
        for op, count in sorted(metrics.operators_by_type.items(), key=lambda x: x[1], reverse=True):
            if count > 0:
                percentage = count * 100.0 / metrics.total_operators
                lines.append(f"  {op:>3s} : {count:5d} ({percentage:5.1f}%)")
        lines.append(f"  Total: {metrics.total_operators}")
        lines.append("")

        if metrics.invalid_cases:
            _section(lines, "MUTATION KINDS")
            for kind, count in sorted(metrics.mutations_by_kind.items(), key=lambda x: x[1], reverse=True):
                if count > 0:
                    lines.append(f"  {kind:20s}: {count:3d}")
            lines.append("")

        if metrics.extreme_cases:
            _section(lines, "EXTREME CASE KINDS")
            for kind, count in sorted(metrics.extremes_by_kind.items(), key=lambda x: x[1], reverse=True):
                if count > 0:
                    lines.append(f"  {kind:20s}: {count:3d}")
            lines.append("")

        _section(lines, "TEST CASES")
        for category in Category:
            selected = [c for c in cases if c.category == category]
            if not selected:
                continue
            lines.append(f"{CATEGORY_LABELS[category]} ({len(selected)}):")
            for case in selected:
                lines.append(f"  {case.id}: {case.content}")
                lines.append(f"      {case.description}")
            lines.append("")

        lines.append("=" * 80)
        lines.append("END OF REPORT")
        lines.append("=" * 80)

        return "\n".join(lines)

    def generate_summary(self, metrics: SuiteMetrics) -> str:
        """Generate a short classification summary"""
        if metrics.total_cases == 0:
            return "No test cases to report."

        lines = []
        lines.append("=" * 40)
        lines.append("CLASSIFICATION SUMMARY")
        lines.append("=" * 40)
        lines.append(f"Total cases: {metrics.total_cases}")
        lines.append(f"Valid:   {metrics.valid_cases:4d} ({metrics.valid_percentage:.1f}%)")
        lines.append(f"Invalid: {metrics.invalid_cases:4d} ({metrics.invalid_percentage:.1f}%)")
        lines.append(f"Extreme: {metrics.extreme_cases:4d} ({metrics.extreme_percentage:.1f}%)")
        lines.append("=" * 40)
        return "\n".join(lines)

    def generate_markdown_report(self, cases: List[TestCase], metrics: SuiteMetrics,
                                 grammar: Optional[ContextFreeGrammar] = None) -> str:
        """Generate Markdown report for documentation"""
        lines = []

        title = f"Test Suite: {grammar.name}" if grammar is not None else "Test Suite"
        lines.append(f"# {title}")
        lines.append("")
        lines.append(f"**Generated**: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append(f"**Total Cases**: {metrics.total_cases}")
        lines.append(f"**Execution Time**: {metrics.elapsed_ms:.2f} ms")
        lines.append("")

        if grammar is not None:
            lines.append("## Grammar")
            lines.append("")
            lines.append("```")
            for production in grammar.productions:
                lines.append(str(production))
            lines.append("```")
            lines.append("")

        lines.append("## Distribution")
        lines.append("")
        lines.append("| Category | Count | Percentage |")
        lines.append("|----------|-------|------------|")
        lines.append(f"| Valid | {metrics.valid_cases} | {metrics.valid_percentage:.1f}% |")
        lines.append(f"| Invalid | {metrics.invalid_cases} | {metrics.invalid_percentage:.1f}% |")
        lines.append(f"| Extreme | {metrics.extreme_cases} | {metrics.extreme_percentage:.1f}% |")
        lines.append("")

        lines.append("## Statistics")
        lines.append("")
        lines.append(f"- **Tokens**: avg {metrics.avg_length:.2f}, min {metrics.min_length}, max {metrics.max_length}")
        lines.append(f"- **Depth**: avg {metrics.avg_depth:.2f}, max {metrics.max_depth}")
        lines.append(f"- **Operators**: {metrics.total_operators}")
        lines.append("")

        lines.append("## Test Cases")
        lines.append("")
        lines.append("| ID | Category | Content | Description |")
        lines.append("|----|----------|---------|-------------|")
        for case in cases:
            content = case.content.replace("|", "\\|")
            lines.append(f"| {case.id} | {case.category.value} | `{content}` | {case.description} |")
        lines.append("")

        return "\n".join(lines)

    def generate_json_report(self, cases: List[TestCase], metrics: SuiteMetrics,
                             grammar: Optional[ContextFreeGrammar] = None,
                             configuration: Optional[Dict] = None) -> str:
        """Generate machine-readable JSON report"""
        report = {
            'grammar': grammar.to_dict() if grammar is not None else None,
            'cases': [case.to_dict() for case in cases],
            'metrics': metrics.to_dict(),
            'metadata': {
                'generated_at': datetime.now().isoformat(),
                'version': VERSION,
                'configuration': configuration or {},
            }
        }
        return json.dumps(report, indent=2, ensure_ascii=False)

    def export_json(self, cases: List[TestCase], metrics: SuiteMetrics,
                    grammar: Optional[ContextFreeGrammar] = None,
                    configuration: Optional[Dict] = None,
                    path: Optional[str] = None) -> str:
        """
        Write the JSON report to a file.

        Args:
            path: Destination file; defaults to a timestamped file in output_dir

        Returns:
            Path of the written file
        """
        if path is None:
            os.makedirs(self.output_dir, exist_ok=True)
            path = os.path.join(self.output_dir, timestamped_filename("suite", "json"))
        else:
            path = os.path.expanduser(path)
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.generate_json_report(cases, metrics, grammar, configuration))

        logger.info(f"Exported {len(cases)} cases to {path}")
        return path

    def save_report(self, cases: List[TestCase], metrics: SuiteMetrics,
                    grammar: Optional[ContextFreeGrammar] = None,
                    formats: List[str] = None) -> Dict[str, str]:
        """
        Save report in multiple formats

        Args:
            cases: Classified test cases
            metrics: Suite metrics
            grammar: Grammar the suite was generated from
            formats: List of formats ('text', 'json', 'markdown'). Default: all

        Returns:
            Dict mapping format to saved file path
        """
        if formats is None:
            formats = ['text', 'json', 'markdown']

        os.makedirs(self.output_dir, exist_ok=True)
        saved_files = {}
        base_name = f"suite_report_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        if 'text' in formats:
            text_path = os.path.join(self.output_dir, f"{base_name}.txt")
            with open(text_path, 'w', encoding='utf-8') as f:
                f.write(self.generate_text_report(cases, metrics, grammar))
            saved_files['text'] = text_path

        if 'json' in formats:
            json_path = os.path.join(self.output_dir, f"{base_name}.json")
            with open(json_path, 'w', encoding='utf-8') as f:
                f.write(self.generate_json_report(cases, metrics, grammar))
            saved_files['json'] = json_path

        if 'markdown' in formats:
            md_path = os.path.join(self.output_dir, f"{base_name}.md")
            with open(md_path, 'w', encoding='utf-8') as f:
                f.write(self.generate_markdown_report(cases, metrics, grammar))
            saved_files['markdown'] = md_path

        logger.debug(f"Saved report files: {saved_files}")
        return saved_files
