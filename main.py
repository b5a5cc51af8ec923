#!/usr/bin/env python3
"""Job board build — load the results feed, render ages, write the results page."""

import logging
import os
import sys

import config as config
from results_page import generate_results_page, load_results
from suggest import US_STATES, SuggestionEngine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def build_page(results_path: str | None = None) -> str:
    """Render the results page for a payload file. Returns the written filepath."""
    results_path = results_path or config.RESULTS_PATH

    logger.info("=== Phase 1: LOAD ===")
    jobs = load_results(results_path)
    featured = sum(1 for j in jobs if j.featured)
    logger.info(f"Loaded {len(jobs)} jobs ({featured} featured) from {results_path}")

    logger.info("=== Phase 2: RENDER ===")
    page = generate_results_page(jobs, output_dir=config.OUTPUT_DIR, settings=config.TIMEAGO)
    logger.info(f"Results page saved to {page}")
    return page


def suggest(query: str) -> list[str]:
    """Suggestions for a query from the prefetch file, or the state list without one."""
    if os.path.exists(config.PREFETCH_PATH):
        engine = SuggestionEngine(prefetch=config.PREFETCH_PATH, sorter="fuzzy", limit=10)
    else:
        logger.warning(f"{config.PREFETCH_PATH} not found, suggesting US states")
        engine = SuggestionEngine(local=US_STATES, limit=10)
    return engine.search(query)


if __name__ == "__main__":
    try:
        if len(sys.argv) > 1 and sys.argv[1] == "suggest":
            for match in suggest(" ".join(sys.argv[2:])):
                print(match)
        else:
            build_page(sys.argv[1] if len(sys.argv) > 1 else None)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Build failed: {e}", exc_info=True)
        sys.exit(1)
