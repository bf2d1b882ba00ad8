"""
Command-line entry point: run one matching request against a catalog file
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .catalog_loader import load_catalog
from .config import LOG_LEVELS, ConfigManager, get_config
from .core import CardMatcher, configure_logging
from .exceptions import CardMatcherError
from .formatting import format_currency, generate_savings_explanation, generate_split_explanation
from .validator import validate_criteria


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="card-matcher",
        description="Recommend credit cards for a tuition payment",
    )
    parser.add_argument("--catalog", required=True, help="Card catalog (.json or .csv)")
    parser.add_argument("--criteria", required=True, help="Matching criteria JSON file")
    parser.add_argument("--config", help="Matcher configuration JSON file")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=LOG_LEVELS)
    parser.add_argument("--explain", action="store_true", help="Print human-readable explanations")
    return parser


def render_explanations(result, tuition) -> str:
    sections = []
    for recommendation in result.recommendations:
        header = (
            f"#{recommendation.rank} {recommendation.card.card_name} ({recommendation.card.issuer}) "
            f"- estimated {format_currency(recommendation.estimated_savings)}"
        )
        sections.append(header + "\n" + generate_savings_explanation(recommendation, tuition))
    if result.split_beats_best_single():
        sections.append("Split strategy\n" + generate_split_explanation(result.split_strategy))
    return "\n\n".join(sections)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = ConfigManager(args.config).get_config() if args.config else get_config()
    configure_logging(args.log_level, config.log_format)

    try:
        criteria = validate_criteria(json.loads(Path(args.criteria).read_text(encoding="utf-8")))
        catalog = load_catalog(args.catalog)
        result = CardMatcher(config=config).match(criteria, catalog)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read input: {e}")
        return 2
    except CardMatcherError as e:
        logger.error(str(e))
        return 1

    if args.explain:
        print(render_explanations(result, criteria.tuition_amount))
    else:
        print(json.dumps(result.dict(), indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
