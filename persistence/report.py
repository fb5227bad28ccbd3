"""
Combined Markdown report for a benchmark suite run.
"""

import logging
import os
from typing import Dict, List, Optional

from benchmarks.base import STATUS_OK, PhaseOutcome
from common.phase_manager import RunMetadata
from configuration import (
    BenchConfig,
    FULL_LIST_LABEL,
    PAGINATED_LABEL,
    PREFIX_LABEL,
)

logger = logging.getLogger(__name__)

NO_RESULTS = "_No results._"

SECTIONS = (
    (FULL_LIST_LABEL, "Full List"),
    (PAGINATED_LABEL, "Paginated List"),
    (PREFIX_LABEL, "Prefix & Delimiter"),
)


class ReportAggregator:
    """Composes report.md from per-pattern artifacts already on disk.

    Missing artifacts are replaced by a placeholder; the report is rewritten
    wholesale on every call.
    """

    def __init__(self, config: BenchConfig):
        self.config = config

    def _read_section(self, label: str) -> str:
        path = self.config.artifact_path(label, "md")
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read().strip()
        except OSError:
            logger.debug(f"No artifact at {path}")
            return NO_RESULTS
        return content or NO_RESULTS

    def _section(self, label: str, outcomes: Dict[str, PhaseOutcome]) -> str:
        # With outcomes, only phases that succeeded in this run are quoted
        if outcomes:
            outcome = outcomes.get(label)
            if outcome is None or outcome.status != STATUS_OK:
                return NO_RESULTS
        return self._read_section(label)

    def _metadata_lines(self, metadata: RunMetadata) -> List[str]:
        lines = [
            f"- **Date:** {metadata.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"- **Branch:** {metadata.branch}",
            f"- **Commit:** {metadata.revision}",
            f"- **Endpoint:** {metadata.endpoint}",
            f"- **Tiers:** {' '.join(str(t) for t in metadata.tiers)}",
            f"- **Runs per benchmark:** {metadata.runs} (warmup: {metadata.warmup})",
        ]
        for phase in metadata.phases:
            duration = f"{phase.duration:.0f}s" if phase.duration is not None else "n/a"
            lines.append(f"- **Phase {phase.phase_id}:** {phase.status} ({duration})")
        lines.append(f"- **Total time:** {metadata.elapsed_seconds:.0f}s")
        return lines

    def _issues(self, outcomes: Dict[str, PhaseOutcome]) -> List[str]:
        lines = []
        for outcome in outcomes.values():
            if outcome.error:
                lines.append(f"- **{outcome.label}** failed: {outcome.error}")
            for skipped in outcome.skipped:
                lines.append(f"- {outcome.label} / `{skipped.name}`: {skipped.reason}")
        return lines

    def render(self, metadata: RunMetadata, outcomes: Optional[Dict[str, PhaseOutcome]] = None) -> str:
        outcomes = outcomes or {}
        results_dir = self.config.results_dir

        parts = ["# ListObjects Benchmark Report", ""]
        parts += self._metadata_lines(metadata)
        parts += ["", "---", ""]

        for label, heading in SECTIONS:
            parts += [f"## {heading}", "", self._section(label, outcomes), "", "---", ""]

        issues = self._issues(outcomes)
        if issues:
            parts += ["## Skipped Trials & Errors", ""] + issues + ["", "---", ""]

        parts += [
            "## Raw Data",
            "",
            f"JSON results are in `{results_dir}/`:",
        ]
        parts += [f"- `{label}.json`" for label, _ in SECTIONS]
        parts += [
            "",
            "Inspect a result set:",
            "```bash",
            f"jq '.results[] | {{command: .command, mean: .mean, stddev: .stddev}}' "
            f"{os.path.join(results_dir, FULL_LIST_LABEL + '.json')}",
            "```",
            "",
            "## Comparing Runs",
            "",
            "To compare results between two branches or builds:",
            "",
            "1. Run on build A: `RESULTS_DIR=target/bench-a listbench all`",
            "2. Run on build B: `RESULTS_DIR=target/bench-b listbench all`",
            "3. Compare mean times by command name:",
            "```bash",
            "listbench compare target/bench-a target/bench-b",
            "```",
            "",
        ]
        return "\n".join(parts)

    def write(self, metadata: RunMetadata, outcomes: Optional[Dict[str, PhaseOutcome]] = None) -> str:
        """Write report.md and return its path."""
        self.config.ensure_results_dir()
        path = self.config.report_path
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render(metadata, outcomes))
        logger.info(f"Report: {path}")
        return path
