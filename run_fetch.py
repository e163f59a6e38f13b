#!/usr/bin/env python3
"""
One-off ingestion from the command line.

    python run_fetch.py                     # fetch all active keywords
    python run_fetch.py --retranslate-all   # fill in missing translations
"""

import argparse
import asyncio

from papercatcher.config import setup_logging
from papercatcher.database.db.session import init_models
from papercatcher.jobs.fetch_papers import IngestionPipeline


async def main(retranslate_all: bool = False):
    print("🌿 Paper Catcher: arXiv Fetch Running...")
    setup_logging()
    await init_models()

    pipeline = IngestionPipeline()
    if retranslate_all:
        result = await pipeline.retranslate_all()
    else:
        result = await pipeline.run()

    print(f"\n📚 {result.message}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Paper Catcher fetch job")
    parser.add_argument("--retranslate-all", action="store_true", help="Translate papers missing a translation")
    args = parser.parse_args()
    asyncio.run(main(retranslate_all=args.retranslate_all))
