"""Run orchestrator: client lifecycle, aggregation and output."""

from __future__ import annotations

import logging
import os
from typing import Any

from .aggregator import aggregate_profile
from .exceptions import MissingTokenError
from .github.client import GitHubClient
from .models import ProfileReport
from .renderer import render_json, render_step_summary, render_summary

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "github-user-stats.json"


async def run(
    token: str,
    output_file: str = DEFAULT_OUTPUT_FILE,
    show_summary: bool = True,
    **options: Any,
) -> ProfileReport:
    """Collect the snapshot and write it to ``output_file``.

    The file is only written once aggregation has fully succeeded; fatal
    errors propagate and leave no output behind.
    """
    if not token:
        raise MissingTokenError()

    async with GitHubClient(token) as client:
        report = await aggregate_profile(client, **options)

    render_json(report, output_file)
    logger.info("Wrote %s", output_file)

    if show_summary:
        render_summary(report)

    step_summary = os.environ.get("GITHUB_STEP_SUMMARY")
    if step_summary:
        render_step_summary(report, step_summary)

    return report
