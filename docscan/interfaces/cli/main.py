"""Command line interface for scanning still images."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import pydantic

from ...application.services.batch_processor import BatchProcessor
from ...config import DETECTION_CONFIG, SUPPORTED_IMAGE_EXTENSIONS
from ...domain.value_objects.config import ColorMode, EnhancementOptions, ScanConfig
from ...exceptions import ConfigurationError, DocScanError, ValidationError
from ...utils.log import setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="docscan",
        description="Find documents in photos, flatten them and clean them up"
    )

    parser.add_argument("input", help="Input image or folder")
    parser.add_argument("-o", "--output", required=True, help="Output folder")

    # Detection
    parser.add_argument(
        "-w", "--analysis-width",
        type=int,
        default=DETECTION_CONFIG.analysis_width,
        help=f"Width frames are analysed at (default: {DETECTION_CONFIG.analysis_width})"
    )
    parser.add_argument(
        "--no-correct",
        action="store_true",
        help="Keep the full frame instead of flattening the detected page"
    )
    parser.add_argument(
        "--overlay",
        action="store_true",
        help="Also save the input with the detected outline drawn on it"
    )

    # Enhancement settings group
    enhance_group = parser.add_argument_group("Enhancement options")
    enhance_group.add_argument(
        "-m", "--mode",
        choices=[m.value for m in ColorMode],
        default=ColorMode.COLOR.value,
        help="Color mode (default: color)"
    )
    enhance_group.add_argument(
        "-b", "--brightness",
        type=float,
        default=100,
        help="Brightness percent, 0-200 (default: 100)"
    )
    enhance_group.add_argument(
        "-c", "--contrast",
        type=float,
        default=100,
        help="Contrast percent, 0-200 (default: 100)"
    )
    enhance_group.add_argument(
        "--sharpen",
        action="store_true",
        help="Sharpen the result"
    )
    enhance_group.add_argument(
        "--remove-background",
        action="store_true",
        help="Lift shadows on the paper background"
    )
    enhance_group.add_argument(
        "--options-file",
        type=Path,
        help="JSON file with enhancement options (overrides the flags above)"
    )

    # Output and error handling
    parser.add_argument(
        "--report",
        type=Path,
        help="Write a JSON summary of the run to this file"
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Continue processing remaining images if one fails"
    )
    parser.add_argument(
        "--log-file",
        help="Also write log output to this file"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    return parser


def load_options(parsed_args) -> EnhancementOptions:
    """Build enhancement options from flags or an options file.

    Raises:
        ValidationError: If the options are invalid
    """
    if parsed_args.options_file:
        try:
            with open(parsed_args.options_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ValidationError(f"Could not read options file: {e}", field="options_file") from e
        if not isinstance(data, dict):
            raise ValidationError("Options file must contain a JSON object", field="options_file")
        return EnhancementOptions.parse(data)

    return EnhancementOptions.parse({
        "mode": parsed_args.mode,
        "brightness": parsed_args.brightness,
        "contrast": parsed_args.contrast,
        "sharpen": parsed_args.sharpen,
        "remove_background": parsed_args.remove_background,
    })


def build_config(parsed_args, options: EnhancementOptions) -> ScanConfig:
    """Session settings from the command line.

    Raises:
        ConfigurationError: If a setting is out of range
    """
    try:
        return ScanConfig(
            analysis_width=parsed_args.analysis_width,
            correct_perspective=not parsed_args.no_correct,
            enhancement=options
        )
    except pydantic.ValidationError as e:
        errors = e.errors()
        key = str(errors[0]["loc"][0]) if errors and errors[0]["loc"] else None
        raise ConfigurationError(f"Invalid settings: {e}", config_key=key) from e


def collect_files(input_path: Path) -> list[Path]:
    """Images to scan: the input file itself, or the images in a folder."""
    if input_path.is_file():
        return [input_path]
    files = [
        f for f in input_path.iterdir()
        if f.is_file() and f.suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS
    ]
    files.sort()
    return files


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    setup_logging(logging.DEBUG if parsed.verbose else logging.INFO, parsed.log_file)

    input_path = Path(parsed.input)
    output_path = Path(parsed.output)

    if not input_path.exists():
        logger.error(f"Input not found: {input_path}")
        return 1

    try:
        options = load_options(parsed)
        config = build_config(parsed, options)
    except DocScanError as e:
        logger.error(str(e))
        return 1

    files = collect_files(input_path)
    if not files:
        logger.error("No image files found")
        return 1

    logger.info(f"Scanning {len(files)} image(s)...")
    logger.info(
        f"Mode: {options.mode.value}, brightness {options.brightness:g}, "
        f"contrast {options.contrast:g}"
    )

    processor = BatchProcessor(config, save_overlay=parsed.overlay)
    try:
        result = processor.process_files(
            files,
            output_path,
            progress_callback=lambda i, total, msg: logger.info(f"[{i}/{total}] {msg}"),
            continue_on_error=parsed.continue_on_error
        )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1

    if parsed.report:
        with open(parsed.report, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2)
        logger.info(f"Report written to {parsed.report}")

    # Summary
    logger.info("=" * 50)
    logger.info(f"Documents detected: {result.detected}/{result.total}")

    failed = [record for record in result.results if not record.capture.success]
    if failed or len(result.results) < result.total:
        logger.warning(f"Completed: {result.successful}/{result.total} succeeded")
        for record in failed:
            logger.error(f"  - {record.path.name}: {record.capture.error_message}")
        if len(result.results) < result.total:
            logger.error("Use --continue-on-error to process remaining images")
        return 1

    logger.info(f"Completed: All {result.total} images scanned successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
