#!/usr/bin/env python3
"""CLI runner for DNPR contact duration and patient type.

Usage:
    python -m dnpr_src.runner duration kontakter.csv
    python -m dnpr_src.runner duration kontakter.parquet --unit minutes
    python -m dnpr_src.runner classify kontakter.csv --method hybrid
"""

import argparse
import logging
import sys

from .classifier import PatientTypeClassifier
from .config import Config
from .data.duration import derive_duration
from .data.sources import source_from_path, write_output
from .models import ClassificationMethod, DNPRError, DurationUnit, OutputFormat


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def run_duration(path: str, unit: str, output: str) -> None:
    """Derive duration for a contact file and write it beside the input."""
    written = derive_duration(source_from_path(path), unit=unit, output=output)
    print(f"Wrote {written}")


def run_classify(path: str, method: str, output: str, department: str | None = None) -> None:
    """Classify a contact file and write it beside the input."""
    source = source_from_path(path)
    classifier = PatientTypeClassifier(method, department=department)

    classified = classifier.classify(source.load())
    written = write_output(classified, source, OutputFormat(output))

    show_summary(classifier.summarize(classified).to_dict())
    print(f"Wrote {written}")


def show_summary(summary: dict) -> None:
    """Display patient type counts."""
    print(f"\n=== Patient Types ({summary['method']}) ===")
    print(f"Contacts:   {summary['total']}")
    for label, count in summary["by_label"].items():
        print(f"  {label:22s} {count}")
    print(f"  {'Unlabeled':22s} {summary['unlabeled']}")
    if summary["unlabeled"]:
        print(f"    missing inputs:      {summary['unlabeled_missing_inputs']}")
        print(f"    complete inputs:     {summary['unlabeled_complete_inputs']}")
    print()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="DNPR3 contact duration and patient type",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Duration in hours, written to kontakter_out.csv
    python -m dnpr_src.runner duration kontakter.csv

    # Duration in minutes, written as Parquet
    python -m dnpr_src.runner duration kontakter.csv --unit minutes --output parquet

    # Patient type with the hybrid algorithm
    python -m dnpr_src.runner classify kontakter.parquet --method hybrid

    # Department-level hybrid algorithm, aggregating p_overnight by unit
    python -m dnpr_src.runner classify kontakter.csv --method hybrid_dep --department afdeling
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    duration_parser = commands.add_parser("duration", help="Add contact duration")
    duration_parser.add_argument("path", help="Input .csv or .parquet file")
    duration_parser.add_argument(
        "--unit",
        choices=[unit.value for unit in DurationUnit],
        default=Config.DEFAULT_UNIT,
        help="Duration unit (default: %(default)s)",
    )
    duration_parser.add_argument(
        "--output",
        choices=[OutputFormat.CSV.value, OutputFormat.PARQUET.value],
        default=OutputFormat.CSV.value,
        help="Output file format (default: %(default)s)",
    )

    classify_parser = commands.add_parser("classify", help="Add patient type")
    classify_parser.add_argument("path", help="Input .csv or .parquet file")
    classify_parser.add_argument(
        "--method",
        choices=[method.value for method in ClassificationMethod],
        default=Config.DEFAULT_METHOD,
        help="Patient type algorithm (default: %(default)s)",
    )
    classify_parser.add_argument(
        "--department",
        help="Organizational unit column for hybrid_dep when p_overnight is absent",
    )
    classify_parser.add_argument(
        "--output",
        choices=[OutputFormat.CSV.value, OutputFormat.PARQUET.value],
        default=OutputFormat.CSV.value,
        help="Output file format (default: %(default)s)",
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        if args.command == "duration":
            run_duration(args.path, args.unit, args.output)
        else:
            run_classify(args.path, args.method, args.output, args.department)
    except (DNPRError, ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
