"""
NullFake - Review Authenticity Scoring

CLI entry point for scoring a file of product reviews.
"""

import argparse
import json
import logging
import sys

import config.settings as settings
from nullfake.analyzer import create_analyzer_from_env
from nullfake.errors import ConfigurationError, ReviewAnalysisError


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def load_reviews(path: str) -> list:
    """Load reviews from a JSON file (a list, or {"reviews": [...]})."""
    with open(path, "r", encoding="utf-8", errors="surrogateescape") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("reviews", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of reviews in {path}")
    return data


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="NullFake - AI review authenticity scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Score reviews with the default provider
  python main.py --input reviews.json

  # Use Gemini and sequential chunks
  python main.py --input reviews.json --provider gemini --mode sequential

Note: Set OPENAI_API_KEY (or GOOGLE_API_KEY for Gemini) before running.
        """
    )

    parser.add_argument(
        "--input",
        required=True,
        help="JSON file containing the reviews to score"
    )

    parser.add_argument(
        "--provider",
        default=settings.LLM_PROVIDER,
        choices=["openai", "gemini"],
        help=f"LLM provider (default: {settings.LLM_PROVIDER})"
    )

    parser.add_argument(
        "--mode",
        default=settings.DISPATCH_MODE,
        choices=["parallel", "sequential"],
        help=f"How large batches are chunked (default: {settings.DISPATCH_MODE})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    args = parser.parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    # Fail fast on missing credentials
    try:
        analyzer = create_analyzer_from_env(args.provider, mode=args.mode)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        reviews = load_reviews(args.input)
        result = analyzer.analyze(reviews)

    except KeyboardInterrupt:
        logger.warning("Analysis interrupted by user")
        sys.exit(1)

    except ReviewAnalysisError as e:
        logger.error(f"Analysis failed: {e}")
        print(f"Analysis failed: {e}", file=sys.stderr)
        sys.exit(1)

    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Could not read reviews from {args.input}: {e}", exc_info=True)
        sys.exit(1)

    print(json.dumps(result.to_dict(), indent=2))

    print("=" * 60, file=sys.stderr)
    print(f"Reviews: {len(reviews)}", file=sys.stderr)
    print(f"Scored: {len(result.detailed_scores)}", file=sys.stderr)
    print(f"Undetermined: {len(reviews) - len(result.detailed_scores)}", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    sys.exit(0)


if __name__ == "__main__":
    main()
