"""CLI entrypoints for docsync commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from .config import DocSyncConfig, load_config
from .errors import ConfigError, DocSyncError, PathNotFound, PermissionDenied
from .logging import configure_logging
from .models import DEPTHS, AnalysisResult, SyncReport, ValidationResult
from .pipeline import Pipeline, validation_options
from .reports import write_report


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_output_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the JSON report to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsync",
        description="Detect documentation drift and validate Markdown/MDX documentation.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .docsync.yml (defaults to the current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Build a structural model of a project and list documentation needs.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Project root (defaults to the configured root).",
    )
    analyze_parser.add_argument(
        "--include",
        action="append",
        default=[],
        metavar="GLOB",
        help="Glob of files to analyze; repeatable.",
    )
    analyze_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="GLOB",
        help="Glob of files to skip; repeatable.",
    )
    analyze_parser.add_argument("--depth", choices=DEPTHS, default=None)
    _add_output_option(analyze_parser)

    sync_parser = subparsers.add_parser(
        "sync",
        help="Report outdated and missing documentation.",
    )
    _add_verbose_option(sync_parser, suppress_default=True)
    sync_parser.add_argument("--docs", type=Path, default=None, help="Documentation root.")
    sync_parser.add_argument("--source", type=Path, default=None, help="Source root.")
    sync_parser.add_argument(
        "--auto-update",
        action="store_true",
        default=None,
        help="Recommend regenerating every drifted page.",
    )
    _add_output_option(sync_parser)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate frontmatter, links and code blocks of documentation files.",
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    validate_parser.add_argument("--docs", type=Path, default=None, help="Documentation root.")
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Treat a missing description as an error.",
    )
    validate_parser.add_argument(
        "--no-links",
        dest="check_links",
        action="store_false",
        default=None,
        help="Skip internal link resolution.",
    )
    validate_parser.add_argument(
        "--no-code-examples",
        dest="check_code_examples",
        action="store_false",
        default=None,
        help="Skip fenced code block checks.",
    )
    _add_output_option(validate_parser)

    check_parser = subparsers.add_parser(
        "check",
        help="Run sync and validate; fails when either fails.",
    )
    _add_verbose_option(check_parser, suppress_default=True)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsync commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config or Path.cwd())
        status = _dispatch(args, config)
    except (PathNotFound, PermissionDenied, ConfigError) as exc:
        parser.exit(2, f"{exc}\n")
    except DocSyncError as exc:
        parser.exit(1, f"docsync {args.command} failed: {exc}\nRun with --verbose for more details.\n")
    if status:
        parser.exit(status)


def _dispatch(args: argparse.Namespace, config: DocSyncConfig) -> int:
    pipeline = Pipeline()

    if args.command == "analyze":
        result = pipeline.run_analysis(
            args.path or config.root,
            include=args.include or config.include or None,
            exclude=[*config.exclude, *args.exclude],
            depth=args.depth or config.analysis.depth,
            extractors=config.analysis.extractors or None,
        )
        _emit(_format_analysis(result), result, args.output)
        return 0

    if args.command == "sync":
        report = pipeline.run_sync(
            args.docs or config.docs,
            args.source or config.source,
            auto_update=config.sync.auto_update if args.auto_update is None else args.auto_update,
            source_extension=config.sync.source_extension,
            include=config.include or None,
            exclude=config.exclude,
        )
        _emit(_format_sync(report), report, args.output)
        return 0 if report.synced else 1

    if args.command == "validate":
        options = validation_options(config)
        if args.strict is not None:
            options.strict = args.strict
        if args.check_links is not None:
            options.check_links = args.check_links
        if args.check_code_examples is not None:
            options.check_code_examples = args.check_code_examples
        result = pipeline.run_validation(args.docs or config.docs, options, exclude=config.exclude)
        _emit(_format_validation(result), result, args.output)
        return 0 if result.valid else 1

    if args.command == "check":
        outcome = pipeline.run_check(config)
        print(_format_sync(outcome.sync))
        print(_format_validation(outcome.validation))
        return 0 if outcome.success else 1

    raise DocSyncError(f"Unknown command {args.command!r}")  # pragma: no cover - argparse enforces choices


def _emit(text: str, report: AnalysisResult | SyncReport | ValidationResult, output: Path | None) -> None:
    print(text)
    if output is not None:
        written = write_report(output, report)
        print(f"Report written to {_relativize(written)}")


def _format_analysis(result: AnalysisResult) -> str:
    structure = result.structure
    lines: List[str] = [
        f"Analyzed {len(structure.files)} source files ({result.depth} depth)",
        f"Languages: {', '.join(structure.languages) or 'none'}",
        f"Frameworks: {', '.join(structure.frameworks) or 'none'}",
        f"APIs: {len(result.apis)}, components: {len(result.components)}",
        f"Documentation needs: {len(result.documentation_needs)}",
    ]
    for need in result.documentation_needs:
        lines.append(f"  [{need.priority}] {need.kind} {need.target_file}: {need.suggestion}")
    return "\n".join(lines)


def _format_sync(report: SyncReport) -> str:
    summary = report.summary
    lines: List[str] = [
        f"Sync status: {report.status}",
        f"  source files: {summary.total_source_files}, doc files: {summary.total_doc_files}",
        f"  up to date: {summary.up_to_date}, outdated: {summary.outdated}, "
        f"missing: {summary.missing}, unverified: {summary.unverified}",
    ]
    if summary.skipped_directories:
        lines.append(f"  skipped unreadable directories: {summary.skipped_directories}")
    for entry in report.outdated:
        lines.append(
            f"  outdated [{entry.priority}] {entry.doc_path} ({entry.days_behind} days behind {entry.source_path})"
        )
    for entry in report.missing:
        lines.append(f"  missing [{entry.priority}] {entry.expected_doc_path} for {entry.source_path}")
    return "\n".join(lines)


def _format_validation(result: ValidationResult) -> str:
    summary = result.summary
    lines: List[str] = [
        f"Validation {'passed' if result.valid else 'failed'}: "
        f"{summary.total_errors} errors, {summary.total_warnings} warnings "
        f"in {summary.total_files} files",
    ]
    if summary.skipped_directories:
        lines.append(f"  skipped unreadable directories: {summary.skipped_directories}")
    for issue in [*result.errors, *result.warnings]:
        location = f"{issue.file}:{issue.line}" if issue.line is not None else issue.file
        lines.append(f"  {issue.severity} {location} {issue.kind}: {issue.message}")
    return "\n".join(lines)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
