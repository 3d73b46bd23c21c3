#!/usr/bin/env python3
"""
Pregnancy Record Filter - Main Entry Point
==========================================
Command-line interface for filtering pregnancy datasets down to their
statistically relevant fields.

Usage:
    python main.py input.json output.json
    python main.py input.json output.json --config configs/default.ini --policy strict

Outputs:
    output.json   Filtered dataset with only whitelisted properties
    results.txt   Processing report (next to output.json)
"""

import argparse
import configparser
import logging
import logging.handlers
import sys
import os
from datetime import datetime
from typing import List, Optional

from core.config import Config, ValidationPolicy
from core.pipeline import FilterJob


class _BelowLevelFilter(logging.Filter):
    """Pass only records below a level (keeps errors off stdout)."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging with console and optional file output.

    Progress goes to stdout, errors to stderr.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file name. If None, auto-generated.
        log_dir: Directory for log files; no file logging when None

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper()))
    # Replace handlers from an earlier call (repeated main() invocations)
    for handler in list(logger.handlers):
        if getattr(handler, "_pregnancy_filter", False):
            logger.removeHandler(handler)
            handler.close()

    console_format = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    console_handler.addFilter(_BelowLevelFilter(logging.ERROR))
    console_handler.setFormatter(console_format)
    console_handler._pregnancy_filter = True
    logger.addHandler(console_handler)

    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(console_format)
    error_handler._pregnancy_filter = True
    logger.addHandler(error_handler)

    # File handler (rotating)
    if log_file or log_dir:
        log_dir = log_dir or "logs"
        os.makedirs(log_dir, exist_ok=True)
        if log_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = f"pregnancy_filter_{timestamp}.log"

        log_path = os.path.join(log_dir, log_file)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s'
        )
        file_handler.setFormatter(file_format)
        file_handler._pregnancy_filter = True
        logger.addHandler(file_handler)
        logger.info(f"Logging to file: {log_path}")

    return logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Pregnancy Record Filter - keep only statistical fields of a pregnancy dataset",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Filter with the built-in configuration (salvage policy)
    python main.py data/input.json data/output.json

    # Reject whole clients when any pregnancy is incomplete
    python main.py data/input.json data/output.json --policy strict

    # Custom whitelists and a CSV of everything that was skipped
    python main.py data/input.json data/output.json \\
        --config configs/default.ini --skipped-csv data/skipped.csv

A results.txt report is written next to the output file.
        """
    )

    # Required arguments
    parser.add_argument("input", help="Path to the input JSON file (array of clients)")
    parser.add_argument("output", help="Path of the filtered output JSON file")

    # Optional overrides
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to configuration INI file (default: built-in tables)"
    )

    parser.add_argument(
        "--policy",
        choices=[p.value for p in ValidationPolicy],
        default=None,
        help="Override validation policy (strict: reject whole client, salvage: drop invalid pregnancies)"
    )

    parser.add_argument(
        "--skipped-csv",
        type=str,
        default=None,
        help="Also write skipped clients/pregnancies to this CSV file"
    )

    # Logging options
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory for log files (default: no log file)"
    )

    # Execution options
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration and exit without processing"
    )

    return parser.parse_args(argv)


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command-line overrides to configuration."""
    if args.policy is not None:
        config = config.with_policy(ValidationPolicy.from_string(args.policy))
    return config


def print_banner():
    """Print application banner."""
    banner = """
╔════════════════════════════════════════════════════════════╗
║              Pregnancy Record Filter v1.0.0                ║
║       Whitelist filtering for pregnancy care datasets      ║
╚════════════════════════════════════════════════════════════╝
    """
    print(banner)


def print_config_summary(config: Config, args: argparse.Namespace, logger: logging.Logger):
    """Print configuration summary."""
    logger.info("=" * 60)
    logger.info("Configuration Summary")
    logger.info("=" * 60)
    logger.info(f"Input Path:               {os.path.abspath(args.input)}")
    logger.info(f"Output Path:              {os.path.abspath(args.output)}")
    for line in config.summary_lines():
        logger.info(line)
    logger.info("=" * 60)


def print_summary(statistics, policy: ValidationPolicy):
    """Print final counts to the console."""
    print("")
    print("Processing complete!")
    print(f"  Total clients: {statistics.total_clients}")
    print(f"  Transformed: {statistics.success_count}")
    print(f"  Skipped clients: {statistics.skipped_clients_count}")
    if policy is ValidationPolicy.SALVAGE:
        print(f"  Skipped pregnancies: {statistics.skipped_pregnancies_count}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for input/output/config errors, 2 otherwise)
    """
    print_banner()

    # Parse arguments
    args = parse_args(argv)

    # Set up logging
    logger = setup_logging(
        log_level=args.log_level,
        log_dir=args.log_dir
    )

    try:
        # Load configuration
        if args.config:
            logger.info(f"Loading configuration from: {args.config}")
            config = Config.from_ini(args.config)
        else:
            config = Config()

        # Apply command-line overrides
        config = apply_overrides(config, args)

        # Validate configuration
        logger.info("Validating configuration...")
        config.validate()

        # Print summary
        print_config_summary(config, args, logger)

        # Dry run check
        if args.dry_run:
            logger.info("Dry run mode - exiting without processing")
            return 0

        job = FilterJob(config)
        result = job.run(
            input_path=os.path.abspath(args.input),
            output_path=os.path.abspath(args.output),
            skipped_csv_path=os.path.abspath(args.skipped_csv) if args.skipped_csv else None,
        )

        summary = result.to_dict()
        logger.info("=" * 60)
        logger.info("Processing Complete")
        logger.info("=" * 60)
        logger.info(f"Duration:                 {summary['duration_seconds']:.2f} seconds")
        logger.info(f"Output Path:              {result.output_path}")
        logger.info(f"Report Path:              {result.report_path}")
        logger.info(f"Peak Memory:              {summary['peak_memory_mb']} MB")
        logger.info("=" * 60)

        print_summary(result.statistics, config.policy)
        return 0

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input or configuration: {e}")
        return 1
    except configparser.Error as e:
        logger.error(f"Invalid configuration file: {e}")
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
