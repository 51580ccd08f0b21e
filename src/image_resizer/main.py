"""Main module for the image resizer CLI."""

import sys
import json
import argparse
from typing import Any, Dict, List

from .core import ConfigurationError, PipelineConfig, derive_key, get_logger, is_derivative
from .core.factories import ResizePipelineFactory
from .core.observability import LogLevel, create_logger


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags overriding the environment configuration."""
    parser.add_argument("--target-height", type=int, default=None, help="Derivative height in pixels")
    parser.add_argument("--source-bucket", default=None, help="Only accept events from this bucket")
    parser.add_argument("--dest-bucket", default=None, help="Destination bucket (default: source bucket)")
    parser.add_argument("--source-prefix", default=None, help="Source key prefix")
    parser.add_argument("--dest-prefix", default=None, help="Destination key prefix")
    parser.add_argument("--marker", default=None, help="Derivative marker, e.g. _resized")
    parser.add_argument(
        "--marker-strategy",
        default=None,
        choices=["infix", "prefix"],
        help="How derivative keys are marked",
    )


def _config_from_args(args: argparse.Namespace) -> PipelineConfig:
    return PipelineConfig.from_env(
        target_height=args.target_height,
        source_bucket=args.source_bucket,
        destination_bucket=args.dest_bucket,
        source_prefix=args.source_prefix,
        destination_prefix=args.dest_prefix,
        derivative_marker=args.marker,
        marker_strategy=args.marker_strategy,
    )


def invoke(args: argparse.Namespace) -> int:
    """Run the pipeline on an event file, as the Lambda runtime would."""
    config = _config_from_args(args)
    with open(args.event, "r", encoding="utf-8") as f:
        event: Dict[str, Any] = json.load(f)

    logger = create_logger(
        "image-resizer.pipeline", LogLevel.DEBUG if args.debug else None
    )
    pipeline = ResizePipelineFactory.create_pipeline(config, logger=logger)
    response = pipeline.run(event).to_response()
    print(json.dumps(response, indent=2))
    return 0 if response["statusCode"] < 400 else 1


def check_config(args: argparse.Namespace) -> int:
    """Print the derivative key for each sample key and check it is guarded."""
    config = _config_from_args(args)
    print(config.model_dump_json(indent=2))

    failures = 0
    sample_keys: List[str] = args.keys
    for key in sample_keys:
        if is_derivative(key, config):
            print(f"{key} -> skipped (already a derivative)")
            continue
        derived = derive_key(key, config)
        guarded = is_derivative(derived, config)
        print(f"{key} -> {derived}{'' if guarded else '  NOT GUARDED'}")
        if not guarded:
            failures += 1
    return 1 if failures else 0


def main() -> None:
    """
    Entry point for the image resizer command-line interface.

    Commands:
        invoke: run the pipeline locally against a JSON S3 event file
        check-config: validate configuration and preview derivative keys
        version: show version information
    """
    parser = argparse.ArgumentParser(
        prog="image-resizer",
        description="Image Resizer - S3-triggered derivative production with loop protection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the pipeline on a saved S3 notification
  image-resizer invoke --event event.json --dest-bucket my-thumbs

  # Preview derivative keys for a prefix-swap deployment
  image-resizer check-config --marker-strategy prefix --marker resized__ \\
                             --source-prefix original-images/ \\
                             --dest-prefix resized-images/ original-images/a.jpg

  # Show version
  image-resizer version
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    invoke_parser = subparsers.add_parser("invoke", help="Process an S3 event file")
    invoke_parser.add_argument("--event", required=True, help="Path to a JSON S3 event")
    invoke_parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    _add_config_arguments(invoke_parser)

    check_parser = subparsers.add_parser(
        "check-config", help="Validate configuration and preview derivative keys"
    )
    check_parser.add_argument("keys", nargs="*", help="Sample source keys")
    _add_config_arguments(check_parser)

    subparsers.add_parser("version", help="Show version information")

    args = parser.parse_args()

    if args.command in ("invoke", "check-config"):
        logger = get_logger("image-resizer.cli")

        try:
            exit_code = invoke(args) if args.command == "invoke" else check_config(args)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            exit_code = 2
        except (OSError, ValueError) as e:
            # Unreadable or non-JSON --event file
            logger.error(f"Cannot load event file '{getattr(args, 'event', '')}': {e}")
            exit_code = 2
        sys.exit(exit_code)

    elif args.command == "version":
        print("Image Resizer CLI")
        print("Version 0.1.0")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
