"""roster_recon.cli

Command-line entry point.

Modes:
  reconcile  match a roster CSV against a member snapshot and report
  template   write the roster template CSV
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

import click

from roster_recon.keywords import DEFAULT_KEYWORDS, load_keyword_rules
from roster_recon.members import load_member_snapshot
from roster_recon.reconcile import reconcile
from roster_recon.report import build_report, describe_error, roster_template
from roster_recon.shared import (
    KeywordRulesValidationError,
    RejectWriter,
    RosterImportError,
    RunCounters,
    write_run_report,
)


@click.command()
@click.option(
    "--mode",
    default="reconcile",
    type=click.Choice(["reconcile", "template"]),
    show_default=True,
    help="Run mode",
)
@click.option("--csv-path", default=None, type=click.Path(), help="Roster CSV (input for reconcile, output for template)")
@click.option("--members-path", default=None, type=click.Path(), help="[reconcile] Member snapshot (.json or .csv)")
@click.option("--keywords-file", default=None, type=click.Path(), help="[reconcile] YAML header keyword rules")
@click.option(
    "--rejects-path",
    default="./artifacts/rejects/roster_rejects.csv",
    show_default=True,
    help="[reconcile] CSV receiving rejected rows",
)
@click.option("--summary-path", default=None, type=click.Path(), help="[reconcile] Write the summary as JSON here")
@click.option(
    "--reports-dir",
    default="./artifacts/reports",
    show_default=True,
    help="[reconcile] Directory for JSON run reports",
)
@click.option("--run-id", default=None, help="Override UUID for log correlation")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
def main(
    mode: str,
    csv_path: str | None,
    members_path: str | None,
    keywords_file: str | None,
    rejects_path: str,
    summary_path: str | None,
    reports_dir: str,
    run_id: str | None,
    verbose: bool,
) -> None:
    """Roster reconciliation CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if mode == "template":
        text = roster_template()
        if csv_path:
            Path(csv_path).write_text(text, encoding="utf-8")
            click.echo(f"Template written to {csv_path}")
        else:
            click.echo(text, nl=False)
        return

    run_id = run_id or str(uuid.uuid4())
    started_at = datetime.now(timezone.utc).isoformat()

    if not csv_path or not members_path:
        click.echo(f"[{run_id}] ERROR: --csv-path and --members-path are required", err=True)
        sys.exit(1)

    keywords = DEFAULT_KEYWORDS
    if keywords_file:
        try:
            keywords = load_keyword_rules(Path(keywords_file))
        except (KeywordRulesValidationError, FileNotFoundError) as exc:
            click.echo(f"[{run_id}] FATAL: keyword rules: {exc}", err=True)
            sys.exit(1)

    click.echo(f"[{run_id}] Starting reconcile run (keywords={keywords.version})")

    try:
        csv_text = Path(csv_path).read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        click.echo(f"[{run_id}] FATAL: roster file is not valid UTF-8: {exc}", err=True)
        sys.exit(1)
    try:
        members = load_member_snapshot(Path(members_path))
    except ValueError as exc:
        click.echo(f"[{run_id}] FATAL: member snapshot: {exc}", err=True)
        sys.exit(1)
    click.echo(f"[{run_id}] Loaded {len(members)} member(s) from {members_path}")

    source_paths = {"csv_path": csv_path, "members_path": members_path}
    try:
        summary = reconcile(csv_text, members, keywords=keywords)
    except RosterImportError as exc:
        message = describe_error(exc)
        report_path = write_run_report(
            run_id, started_at, mode, source_paths, RunCounters(),
            error=message, reports_dir=Path(reports_dir),
        )
        click.echo(f"[{run_id}] Import rejected: {message}", err=True)
        click.echo(f"[{run_id}] Run report: {report_path}")
        sys.exit(1)

    counters = RunCounters.from_summary(summary)
    click.echo(build_report(summary, counters))

    if summary.rejected_rows:
        rejects = RejectWriter(Path(rejects_path))
        try:
            written = rejects.write_rejected(summary.rejected_rows)
        finally:
            rejects.close()
        click.echo(f"[{run_id}] {written} rejected row(s) written to {rejects_path}")

    if summary_path:
        out = Path(summary_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(summary.to_dict(), indent=2, default=str), encoding="utf-8")
        click.echo(f"[{run_id}] Summary: {summary_path}")

    report_path = write_run_report(
        run_id, started_at, mode, source_paths, counters, reports_dir=Path(reports_dir),
    )
    click.echo(f"[{run_id}] Run report: {report_path}")


if __name__ == "__main__":
    main()
