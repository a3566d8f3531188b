"""3-stage analysis pipeline: load -> close -> diagnose."""

from __future__ import annotations

import logging
from typing import Callable

from alias_graph.analysis.alias_dependency import TypeAliasDependency
from alias_graph.analysis.circularity import alias_order, summarize
from alias_graph.errors import CyclicDependency
from alias_graph.loader import load_definitions
from alias_graph.models import AnalysisConfig, AnalysisReport

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


def run_load(config: AnalysisConfig, progress: ProgressCallback | None = None) -> TypeAliasDependency:
    """Stage 1: Load definitions and wrap them in a dependency builder."""
    if progress:
        progress("Loading", 0, 1)
    env = load_definitions(config.definitions_path)
    if progress:
        progress("Loading", 1, 1)
    return TypeAliasDependency(env, guarded_recursion=config.guarded_recursion)


def run_pipeline(
    config: AnalysisConfig,
    progress: ProgressCallback | None = None,
) -> AnalysisReport:
    """Run the full analysis pipeline."""
    # Stage 1: Load
    builder = run_load(config, progress)
    names = builder.env.alias_names()

    # Stage 2: Close
    if config.eager:
        if progress:
            progress("Closing", 0, 1)
        builder.transitive_closure()
        if progress:
            progress("Closing", 1, 1)

    # Stage 3: Diagnose
    if progress:
        progress("Diagnosing", 0, len(names))
    summary = summarize(builder)
    if progress:
        progress("Diagnosing", len(names), len(names))

    report = AnalysisReport(
        aliases=summary["aliases"],
        circular=summary["circular"],
        cycles=summary["cycles"],
        dangling=summary["dangling"],
    )

    try:
        report.order = [str(name) for name in alias_order(builder)]
    except CyclicDependency:
        if config.strict:
            raise
        logger.info("no alias order: %d cycle(s)", len(report.cycles))

    logger.info(
        "analyzed %d aliases: %d circular, %d dangling reference(s)",
        report.aliases, len(report.circular), len(report.dangling),
    )
    return report
