"""AsyncClick CLI: run yarn audit and report findings that survive policy.

The exit status is the number of reportable advisories (clamped to 255),
or 1 on any fatal error.
"""

import asyncclick as click
import structlog

from audit_sieve import __version__
from audit_sieve.core.classifier import classify
from audit_sieve.core.config import DEFAULT_EXCLUSIONS_FILE, DEFAULT_MANIFEST_FILE, load_config
from audit_sieve.core.dependencies import DevDependencyMatcher, load_dev_dependencies
from audit_sieve.core.errors import ConfigError, MalformedOutput, ScanError
from audit_sieve.core.exclusions import resolve_exclusions
from audit_sieve.core.logging_config import configure_logging
from audit_sieve.core.reporting import ReportGenerator
from audit_sieve.core.severity import Severity

logger = structlog.get_logger()

FATAL_EXIT_STATUS = 1

SEVERITY_NAMES = [severity.value for severity in Severity]


def _fail(ctx, message: str, detail: str = ""):
    click.echo(f"[-] {message}", err=True)
    if detail:
        click.echo(detail.rstrip("\n"), err=True)
    raise click.exceptions.Exit(FATAL_EXIT_STATUS)


@click.command()
@click.option("--min-severity", "-s", default=Severity.INFO.value,
              type=click.Choice(SEVERITY_NAMES, case_sensitive=False),
              envvar="AUDIT_SIEVE_MIN_SEVERITY", show_default=True,
              help="Ignore advisories below this severity.")
@click.option("--exclude", "-e", default=None, envvar="AUDIT_SIEVE_EXCLUDE",
              help="Comma-separated advisory ids to ignore. Overrides the exclusions file.")
@click.option("--ignore-dev-deps", "-d", is_flag=True, envvar="AUDIT_SIEVE_IGNORE_DEV_DEPS",
              help="Ignore advisories reachable only through devDependencies.")
@click.option("--retry-network-issues", "-r", is_flag=True,
              envvar="AUDIT_SIEVE_RETRY_NETWORK_ISSUES",
              help="Retry the audit when the registry request fails.")
@click.option("--fail-on-missing-exclusions", "-f", is_flag=True,
              envvar="AUDIT_SIEVE_FAIL_ON_MISSING_EXCLUSIONS",
              help="Count excluded advisories that were not reported toward the exit status.")
@click.option("--debug", is_flag=True, envvar="AUDIT_SIEVE_DEBUG",
              help="Print raw records of ignored advisories and debug logs.")
@click.option("--exclusions-file", default=DEFAULT_EXCLUSIONS_FILE, show_default=True,
              type=click.Path(dir_okay=False), help="Advisory exclusions file.")
@click.option("--manifest", default=DEFAULT_MANIFEST_FILE, show_default=True,
              type=click.Path(dir_okay=False), help="Project manifest declaring devDependencies.")
@click.version_option(__version__, prog_name="audit-sieve")
@click.pass_context
async def cli(ctx, min_severity: str, exclude: str | None, ignore_dev_deps: bool,
              retry_network_issues: bool, fail_on_missing_exclusions: bool, debug: bool,
              exclusions_file: str, manifest: str):
    """Run `yarn audit` and report advisories that are not excluded by policy.

    Examples:
        audit-sieve --min-severity moderate
        audit-sieve -d -r --exclude 118,577
    """
    configure_logging(debug)

    try:
        excluded_ids, warnings = resolve_exclusions(exclude, exclusions_file)
        config = load_config(
            min_severity=Severity.parse(min_severity),
            excluded_advisory_ids=excluded_ids,
            ignore_dev_dependencies=ignore_dev_deps,
            retry_on_network_failure=retry_network_issues,
            fail_on_missing_exclusions=fail_on_missing_exclusions,
            debug=debug,
        )
    except ConfigError as e:
        _fail(ctx, e.message)

    matcher = None
    if config.ignore_dev_dependencies:
        names, manifest_warnings = load_dev_dependencies(manifest)
        warnings.extend(manifest_warnings)
        matcher = DevDependencyMatcher.build(names)

    for warning in warnings:
        click.echo(f"[!] {warning}")

    if config.excluded_advisory_ids:
        ids = ", ".join(str(advisory_id) for advisory_id in sorted(config.excluded_advisory_ids))
        click.echo(f"[*] Excluded advisories: {ids}")
    click.echo(f"[*] Minimum severity: {config.min_severity.value}")

    from audit_sieve.agents import AuditAgent

    agent = AuditAgent(config)

    try:
        findings = await agent.run()
    except MalformedOutput as e:
        _fail(
            ctx,
            e.message,
            f"Offending line: {e.line[:200]}\n"
            "Run `yarn audit --json` directly to inspect the scanner output",
        )
    except ScanError as e:
        _fail(ctx, e.message, e.raw_output)

    classified = classify(findings, config, matcher)

    generator = ReportGenerator(config)
    report = generator.generate(classified)

    if config.debug:
        for line in generator.debug_dump(classified):
            click.echo(line)

    for line in report.lines:
        click.echo(line)

    logger.debug(
        "report_complete",
        reportable=report.reportable_count,
        exit_status=report.exit_status,
    )
    raise click.exceptions.Exit(report.exit_status)


def main():
    cli()


if __name__ == "__main__":
    main()
