#!/usr/bin/env python3
"""
Command-line entry point for the screening core.

Scores one subject's game telemetry from a JSON session file:
1. Risk model (feature vector -> logistic regression -> 0/1 flag)
2. Evidence rules (game metrics -> 18 graded diagnostic criteria)
3. Per-game risk buckets and a narrative summary

Usage:
    python main.py --session session.json --output report.json

Session file layout:
    {
      "profile": {"birth_date": "2014-05-02", "sex": "F"},
      "metrics": {"n_trials": 30, "n_correct": 24, ...},
      "games": {"goNoGo": {...}, "stopSignal": {...}, "tol": {...}},
      "subject_name": "optional"
    }

Outputs are screening indicators, not a diagnosis.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from core.service import ScreeningService
from evidence.rule_engine import summarize_by_domain
from utils.config_loader import DEFAULT_CONFIG_PATH, configure_logging, load_config

logger = logging.getLogger(__name__)


def run_screening(
    session: Dict[str, Any],
    config: Dict[str, Any],
    evaluated_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Score one session file.

    Args:
        session: Parsed session file
        config: Configuration dictionary
        evaluated_at: Reference time for the age computation (default: now)

    Returns:
        JSON-serializable report
    """
    service = ScreeningService(config)

    logger.info("=" * 60)
    logger.info("STAGE 1: Risk model")
    logger.info("=" * 60)
    prediction = service.predict(
        session.get('metrics') or {},
        session.get('profile') or {},
        evaluated_at
    )
    logger.info(
        f"Risk flag: {prediction.classification} "
        f"(p={prediction.score.probability:.3f}, threshold={service.parameters.threshold})"
    )

    logger.info("=" * 60)
    logger.info("STAGE 2: Evidence rules")
    logger.info("=" * 60)
    report = service.build_criteria_report(
        session.get('games') or {},
        session.get('subject_name')
    )
    for domain, counts in summarize_by_domain(report.criteria).items():
        logger.info(f"{domain}: {counts}")

    return {
        'generated_at': (evaluated_at or datetime.now()).isoformat(),
        'model_version': service.parameters.version,
        'risk_model': prediction.to_dict(),
        **report.to_dict(),
    }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Cognitive Game Screening - risk model and evidence-graded criteria',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the report to stdout
  python main.py --session session.json

  # With custom config and output file
  python main.py --session session.json --config custom.yaml --output report.json
        """
    )

    parser.add_argument(
        '--session',
        type=str,
        required=True,
        help='Path to JSON session file'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help='Path to configuration YAML file (default: configs/screening.yaml)'
    )

    parser.add_argument(
        '--output',
        type=str,
        default=None,
        help='Write the JSON report here instead of stdout'
    )

    args = parser.parse_args()

    # Validate config path
    config_path = Path(args.config)
    if not config_path.exists():
        configure_logging()
        logger.error(f"Config file not found: {config_path}")
        sys.exit(1)

    config = load_config(config_path)
    configure_logging(config)

    # Validate session path
    session_path = Path(args.session)
    if not session_path.exists():
        logger.error(f"Session file not found: {session_path}")
        sys.exit(1)

    try:
        with open(session_path, 'r') as f:
            session = json.load(f)

        result = run_screening(session, config)
        output = json.dumps(result, indent=2, ensure_ascii=False)

        if args.output:
            Path(args.output).write_text(output, encoding='utf-8')
            logger.info(f"Report written to {args.output}")
        else:
            print(output)

        sys.exit(0)

    except Exception as e:
        logger.error(f"Screening failed: {type(e).__name__}: {e}")
        logger.exception("Full traceback:")
        sys.exit(1)


if __name__ == '__main__':
    main()
