"""
Command Line Interface for the Process Test Case Generator

- Reads a process model from a JSON file
- Writes the generated test specification (plus coverage report) as JSON
- Exits non-zero with a machine-readable error on stderr if generation fails
"""

from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Optional, List
import logging

from pydantic import ValidationError

from .config import load_settings
from .exceptions import (
    ConfigurationError,
    ProcessStructureError,
    TestGenerationError,
    UnreachableNodeError
)
from .models import ProcessModel, TestSpecification
from .workflow import GenerationResult, TestGenerationWorkflow


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""

    parser = argparse.ArgumentParser(
        prog="process-testgen",
        description="Process Test Case Generator - Derive test cases and procedures from process models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate test cases next to the model
  process-testgen order_process.json --output order_tests.json

  # Skip exact enumeration for very large models
  process-testgen big_process.json --strategy heuristic

  # Tighter enumeration limit, single-threaded
  process-testgen model.json --max-paths 500 --workers 1 -v
        """
    )

    parser.add_argument(
        'model',
        type=Path,
        help='Path to the process model JSON file'
    )

    gen_group = parser.add_argument_group('generation options')
    gen_group.add_argument(
        '--strategy',
        choices=['auto', 'heuristic'],
        help='Path search strategy (default: auto)'
    )
    gen_group.add_argument(
        '--max-paths',
        type=int,
        help='Paths enumerated per condition before falling back to heuristic search'
    )
    gen_group.add_argument(
        '--max-depth',
        type=int,
        help='Maximum path length in connections during enumeration'
    )
    gen_group.add_argument(
        '--max-expansions',
        type=int,
        help='Edges stepped onto per condition during enumeration before falling back'
    )
    gen_group.add_argument(
        '--workers',
        type=int,
        help='Threads used for exact search across conditions'
    )

    output_group = parser.add_argument_group('output options')
    output_group.add_argument(
        '--output',
        '-o',
        type=Path,
        help='Output file for the test specification (default: <model>.tests.json)'
    )
    output_group.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def load_process_model(path: Path) -> ProcessModel:
    """Load and validate a process model JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Process model file not found: {path}")
    with path.open('r', encoding='utf-8') as f:
        data = json.load(f)
    return ProcessModel.model_validate(data)


def default_output_path(model_path: Path) -> Path:
    return model_path.with_name(f"{model_path.stem}.tests.json")


def build_output_document(specification: TestSpecification, result: GenerationResult) -> dict:
    """Serialize the specification with the coverage report and run statistics."""
    coverage = result.coverage.model_dump()
    coverage["is_complete"] = result.coverage.is_complete
    return {
        "specification": specification.model_dump(mode="json"),
        "coverage": coverage,
        "execution_stats": result.execution_stats
    }


def print_success_summary(result: GenerationResult, output_path: Path) -> None:
    """Print brief success summary to stdout."""
    coverage = result.coverage

    print(f"✅ Test Specification Generated Successfully")
    print(f"")
    print(f"📊 Summary:")
    print(f"  Search mode: {result.mode}")
    print(f"  Test Cases: {len(result.test_cases)}")
    print(f"  Parameters: {len(result.parameters)}")
    print(f"  Conditions covered: {len(coverage.covered_conditions)}/{len(coverage.requested_conditions)}")
    if not coverage.is_complete:
        print(f"  Uncovered: {', '.join(coverage.uncovered_conditions)}")
    print(f"")
    print(f"📁 Output: {output_path}")


def print_error_summary(error: Exception) -> None:
    """Print machine-readable error summary to stderr."""

    if isinstance(error, ProcessStructureError):
        error_report = {
            "error_type": "PROCESS_STRUCTURE",
            "rule": error.rule,
            "node_ids": error.node_ids,
            "details": error.details,
            "message": str(error)
        }
    elif isinstance(error, UnreachableNodeError):
        error_report = {
            "error_type": "UNREACHABLE_NODE",
            "node_id": error.node_id,
            "connection_id": error.connection_id,
            "details": error.details,
            "message": str(error)
        }
    else:
        error_report = {
            "error_type": type(error).__name__,
            "message": str(error),
            "details": getattr(error, 'details', None)
        }

    print(json.dumps(error_report, indent=2), file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""

    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(overrides={
            "strategy": args.strategy,
            "max_paths": args.max_paths,
            "max_depth": args.max_depth,
            "max_expansions": args.max_expansions,
            "workers": args.workers
        })
        process = load_process_model(args.model)

        specification = TestSpecification(name=process.name)
        result = TestGenerationWorkflow(settings).run(process, specification)

        output_path = args.output or default_output_path(args.model)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            json.dumps(build_output_document(specification, result), indent=2, ensure_ascii=False),
            encoding='utf-8'
        )

        print_success_summary(result, output_path)
        return 0

    except (ConfigurationError, ValidationError, ValueError, FileNotFoundError) as e:
        logger.error(f"Input validation failed: {e}")
        print_error_summary(e)
        return 2

    except TestGenerationError as e:
        logger.error(f"Test generation failed: {e}")
        print_error_summary(e)
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except Exception as e:
        logger.exception("Unexpected error occurred")
        print_error_summary(e)
        return 3


if __name__ == '__main__':
    sys.exit(main())
