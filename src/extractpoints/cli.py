"""CLI entry point for ExtractPoints."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from extractpoints import __version__, logger
from extractpoints.checkpoint_store import CheckpointStore, load_images, load_ocr_outputs, persist_contents
from extractpoints.classification import divide_into_groups
from extractpoints.exceptions import CheckpointStoreError, PackageError
from extractpoints.logging import configure_logging
from extractpoints.orchestrator import ExtractionOrchestrator
from extractpoints.resolvers.registry import ResolverRegistry
from extractpoints.settings import Settings, get_settings
from extractpoints.typing.models import CheckpointConfig


def _add_checkpoint_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the mutually exclusive checkpoint selectors.

    Args:
        parser (argparse.ArgumentParser): Subcommand parser.
    """
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--checkpoint", type=Path, dest="checkpoint_path", help="Checkpoint configuration file")
    group.add_argument(
        "--form-type",
        dest="form_type_id",
        help="Form type whose configuration is stored under CHECKPOINT_DIR",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="extractpoints")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    classify_parser = subparsers.add_parser(
        "classify",
        help="Show the processing groups of a checkpoint configuration",
    )
    _add_checkpoint_arguments(classify_parser)
    classify_parser.add_argument(
        "--single-page",
        action="store_true",
        dest="single_page",
        help="Classify as a single-page form type regardless of the configuration",
    )

    extract_parser = subparsers.add_parser("extract", help="Extract field values from OCR'd images")
    _add_checkpoint_arguments(extract_parser)
    extract_parser.add_argument("--images", required=True, type=Path, dest="images_path")
    extract_parser.add_argument("--ocr", required=True, type=Path, dest="ocr_path")
    extract_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        dest="output_path",
        help="Output JSON file, defaults to RESULTS_DIR/<form type>.contents.json",
    )

    return parser


def _load_checkpoint(args: argparse.Namespace, settings: Settings) -> CheckpointConfig:
    """Load the checkpoint selected on the command line.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Raises:
        CheckpointStoreError: If no stored configuration matches the form type.

    Returns:
        CheckpointConfig: Selected configuration.
    """
    if args.checkpoint_path is not None:
        return CheckpointStore.load(args.checkpoint_path)

    store = CheckpointStore(root=settings.checkpoint_path)
    checkpoint = store.find(args.form_type_id)
    if checkpoint is None:
        raise CheckpointStoreError(message=f"No checkpoint configuration for form type '{args.form_type_id}'")
    return checkpoint


def _run_classify(args: argparse.Namespace, settings: Settings) -> dict[str, list[str]]:
    """Group the configured extraction points by processing group.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        dict[str, list[str]]: Document fields per group name.
    """
    checkpoint = _load_checkpoint(args, settings)
    multi_page = checkpoint.multi_page and not args.single_page
    groups = divide_into_groups(checkpoint.extract_point, multi_page)
    return {group.value: [point.document_field for point in points] for group, points in groups.items()}


def _run_extract(args: argparse.Namespace, settings: Settings) -> Path:
    """Run extraction and persist the contents.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        Path: Written output path.
    """
    checkpoint = _load_checkpoint(args, settings)
    images = load_images(args.images_path)
    ocr_outputs = load_ocr_outputs(args.ocr_path)

    registry = ResolverRegistry.from_entry_points(settings.resolver_entry_point_group)
    orchestrator = ExtractionOrchestrator(registry, settings=settings)
    contents = orchestrator.parse(images, ocr_outputs, checkpoint)

    output_path = args.output_path or settings.results_path / f"{checkpoint.form_type_id}.contents.json"
    persist_contents(contents, output_path)
    return output_path


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments, defaults to `sys.argv`.

    Returns:
        int: Exit code (0 for success, 1 for error, 130 when interrupted).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in {"classify", "extract"}:
        parser.print_help()
        return 0

    try:
        if args.command == "classify":
            groups = _run_classify(args, settings)
            sys.stdout.write(json.dumps(groups, indent=2, ensure_ascii=False) + "\n")
            return 0
        output_path = _run_extract(args, settings)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user", extra={"command": args.command})
        return 130

    logger.info("Extraction completed", extra={"output_path": str(output_path)})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
