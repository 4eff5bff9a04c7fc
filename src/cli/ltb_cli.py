# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line entry point for batch legacy object documentation."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ltb.config import (
    PROVIDERS,
    PipelineConfig,
    load_config,
    load_enterprise_domains,
)
from ltb.errors import ConfigurationError
from ltb.llm import BedrockGateway, OllamaGateway, OpenAIGateway
from ltb.llm_client import ModelGateway
from ltb.pipeline import FilePipeline, ProcessingReport

logger = logging.getLogger(__name__)

TABLE_COLUMN_RATIOS: dict[str, int] = {
    "file_path": 4,
    "status": 1,
    "stage": 1,
    "error": 4,
}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="ltb")
    subparsers = parser.add_subparsers(dest="command", required=True)
    run_parser = subparsers.add_parser("run")
    run_parser.add_argument(
        "--settings", required=False, help="Settings JSON file (default appsettings.json)."
    )
    run_parser.add_argument("--source", required=False, help="Input documents folder.")
    run_parser.add_argument("--output", required=False, help="Output records folder.")
    run_parser.add_argument("--archive", required=False, help="Archive folder.")
    run_parser.add_argument(
        "--domains", required=False, help="Enterprise domains JSON file."
    )
    run_parser.add_argument("--model-id", required=False, help="Provider model name.")
    run_parser.add_argument(
        "--provider", choices=PROVIDERS, required=False, help="Model provider."
    )
    run_parser.add_argument(
        "--provider-url",
        required=False,
        help="Provider API endpoint URL (openai and ollama only).",
    )
    run_parser.add_argument(
        "--max-tokens", type=int, required=False, help="Maximum tokens per reply."
    )
    run_parser.add_argument(
        "--prompt-file", required=False, help="File holding the prompt template."
    )
    run_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Summary format.",
    )
    return parser


def run(
    argv: list[str],
    stdout: TextIO,
    stderr: TextIO,
    gateway: ModelGateway | None = None,
) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.
        gateway: Optional gateway overriding the configured provider.

    Returns:
        Exit code: 0 when every file succeeded, 1 when any file failed,
        2 for usage or startup failures.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.command == "run":
        return _run_batch(args=args, stdout=stdout, stderr=stderr, gateway=gateway)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_batch(
    args: argparse.Namespace,
    stdout: TextIO,
    stderr: TextIO,
    gateway: ModelGateway | None,
) -> int:
    """Run the batch command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.
        gateway: Optional gateway overriding the configured provider.

    Returns:
        Exit code.
    """
    try:
        config = _resolve_config(args)
        ensure_directories(config)
        domains = load_enterprise_domains(config.enterprise_domains_path)
    except ConfigurationError as exc:
        logger.error(f"Startup failed (error={exc})")
        stderr.write(f"Startup failed: {exc}\n")
        return 2
    except OSError as exc:
        logger.error(f"Failed to prepare directories (error={exc})")
        stderr.write(f"Failed to prepare directories: {exc}\n")
        return 2

    pipeline = FilePipeline(
        gateway=gateway or build_gateway(config),
        enterprise_domains_json=domains,
        prompt_template=config.model_prompt,
        model_id=config.model_id,
        max_tokens=config.max_tokens,
    )
    report = pipeline.process_all(
        source_dir=config.source_dir,
        output_dir=config.output_dir,
        archive_dir=config.archive_dir,
    )
    if args.format == "json":
        _write_json(report=report, stdout=stdout)
    else:
        _write_table(report=report, stdout=stdout)
    return 0 if report.failed == 0 else 1


def _resolve_config(args: argparse.Namespace) -> PipelineConfig:
    """Layer CLI flags over file and environment configuration.

    Raises:
        ConfigurationError: If any source is invalid.
    """
    settings_path = Path(args.settings) if args.settings else None
    config = load_config(settings_path=settings_path)
    prompt = None
    if args.prompt_file:
        try:
            prompt = Path(args.prompt_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(
                f"Failed to read prompt file {args.prompt_file}: {exc}"
            ) from exc
    return config.with_overrides(
        source_dir=args.source,
        output_dir=args.output,
        archive_dir=args.archive,
        enterprise_domains_path=args.domains,
        model_id=args.model_id,
        provider=args.provider,
        provider_url=args.provider_url,
        max_tokens=args.max_tokens,
        model_prompt=prompt,
    )


def ensure_directories(config: PipelineConfig) -> None:
    """Create missing source, output and archive folders.

    Raises:
        OSError: If a folder cannot be created.
    """
    for path in (config.source_dir, config.output_dir, config.archive_dir):
        if not path.exists():
            path.mkdir(parents=True)
            logger.info(f"Created directory (path={path})")


def build_gateway(config: PipelineConfig) -> ModelGateway:
    """Create the configured model gateway.

    Args:
        config: Resolved configuration.

    Returns:
        Gateway for the configured provider.
    """
    if config.provider == "openai":
        return OpenAIGateway(provider_url=config.provider_url)
    if config.provider == "ollama":
        return OllamaGateway(provider_url=config.provider_url)
    return BedrockGateway(region=config.aws_region, profile=config.aws_profile)


def _write_json(report: ProcessingReport, stdout: TextIO) -> None:
    """Write the batch report in JSON format."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(report.to_dict(), indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_table(report: ProcessingReport, stdout: TextIO) -> None:
    """Write the batch report as a Rich table followed by totals."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    table = Table(show_header=True, show_lines=True, expand=True)
    table.add_column(
        "file_path", ratio=TABLE_COLUMN_RATIOS["file_path"], overflow="fold"
    )
    table.add_column("status", ratio=TABLE_COLUMN_RATIOS["status"], overflow="fold")
    table.add_column("stage", ratio=TABLE_COLUMN_RATIOS["stage"], overflow="fold")
    table.add_column("error", ratio=TABLE_COLUMN_RATIOS["error"], overflow="fold")
    for result in report.results:
        error = (
            f"{result.error_kind}: {result.error_message}" if result.error_kind else ""
        )
        table.add_row(result.file_path, result.status, result.stage, error)
    console.print(table)
    console.print(
        f"discovered={report.discovered} succeeded={report.succeeded} "
        f"failed={report.failed}",
        markup=False,
        highlight=False,
    )


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
