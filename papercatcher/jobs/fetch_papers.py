# papercatcher/jobs/fetch_papers.py

"""
Keyword-driven arXiv fetch & translation job.

This module contains PURE job logic.
It is safe to be called by:
- the HTTP API (POST /api/papers/fetch)
- APScheduler
- CLI (run_fetch.py)
"""

import asyncio
import logging
from typing import List, Optional

from papercatcher.config import Config, setup_logging
from papercatcher.crawler.arxiv_client import ArxivFeedClient
from papercatcher.database.keyword_repository import KeywordRepository
from papercatcher.database.paper_repository import PaperRepository
from papercatcher.model.result import IngestionResult, OperationResult
from papercatcher.service.llm_service import Translator
from papercatcher.service.messages import message

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    keyword registry -> feed -> dedup -> translate -> insert

    Keywords and candidates are processed sequentially. A failure on one
    keyword or one candidate is logged, tallied and skipped.
    """

    def __init__(
        self,
        keyword_repo: Optional[KeywordRepository] = None,
        paper_repo: Optional[PaperRepository] = None,
        feed_client: Optional[ArxivFeedClient] = None,
        translator: Optional[Translator] = None,
        max_results: Optional[int] = None,
    ):
        self.keyword_repo = keyword_repo or KeywordRepository()
        self.paper_repo = paper_repo or PaperRepository()
        self.feed_client = feed_client or ArxivFeedClient()
        self.translator = translator or Translator()
        self.max_results = max_results if max_results is not None else Config.feed.max_results

    async def run(self) -> IngestionResult:
        active = await self.keyword_repo.list_active()
        if not active:
            logger.info("⏸ No active keywords, nothing to fetch")
            return IngestionResult(success=False, message=message("no_active_keywords"), count=0)

        total_added = 0
        errors: List[str] = []

        for kw in active:
            try:
                candidates = await self.feed_client.fetch(kw.text, self.max_results)
                added = 0

                for raw in candidates:
                    try:
                        if await self.paper_repo.get_paper_by_source_id(raw.source_id):
                            continue

                        title_translated = ""
                        abstract_translated = ""
                        try:
                            translation = await self.translator.translate(raw.title, raw.abstract)
                            title_translated = translation.title_translated or ""
                            abstract_translated = translation.abstract_translated or ""
                        except Exception as e:
                            logger.warning(f"Translation skipped for {raw.source_id}: {e}")

                        inserted = await self.paper_repo.insert_paper(
                            raw,
                            title_translated=title_translated,
                            abstract_translated=abstract_translated,
                        )
                        if inserted:
                            added += 1
                    except Exception as e:
                        logger.error(f"❌ Failed to add paper {raw.source_id}: {e}")
                        errors.append(f"Failed to add paper: {raw.source_id}")

                total_added += added
                logger.info(f"📌 keyword='{kw.text}' fetched={len(candidates)} inserted={added}")

            except Exception as e:
                logger.error(f"❌ Failed to fetch papers for keyword '{kw.text}': {e}")
                errors.append(f"Failed to fetch papers for keyword: {kw.text}")

        logger.info(f"📚 Total new papers inserted: {total_added} (errors: {len(errors)})")

        if errors:
            text = message("papers_saved_with_errors", count=total_added, errors=len(errors))
        else:
            text = message("papers_saved", count=total_added)
        return IngestionResult(success=True, message=text, count=total_added)

    # --------------------------------------------------
    # Retranslation
    # --------------------------------------------------

    async def retranslate(self, paper_id: int) -> OperationResult:
        paper = await self.paper_repo.get_paper_by_id(paper_id)
        if not paper:
            return OperationResult(success=False, message=message("paper_not_found"))

        translation = await self.translator.translate(paper.title, paper.abstract)
        if translation.is_empty:
            return OperationResult(success=False, message=message("translation_failed"))

        await self.paper_repo.update_translation(
            paper.id,
            translation.title_translated,
            translation.abstract_translated,
        )
        return OperationResult(success=True, message=message("translation_done"))

    async def retranslate_all(self) -> IngestionResult:
        untranslated = await self.paper_repo.list_missing_translation()
        logger.info(f"🔍 Total papers to retranslate: {len(untranslated)}")

        translated = 0
        for paper in untranslated:
            try:
                translation = await self.translator.translate(paper.title, paper.abstract)
                if translation.is_empty:
                    continue
                if await self.paper_repo.update_translation(
                    paper.id,
                    translation.title_translated,
                    translation.abstract_translated,
                ):
                    translated += 1
            except Exception as e:
                logger.error(f"❌ Retranslate failed for paper {paper.source_id}: {e}")

        return IngestionResult(
            success=True,
            message=message("papers_translated", count=translated),
            count=translated,
        )


def run_fetch_papers_job() -> IngestionResult:
    """
    Sync entry point for CLI use.

    NOTE:
    - creates its own event loop
    - inside the API use `await IngestionPipeline().run()` instead
    """
    return asyncio.run(_run())


async def _run() -> IngestionResult:
    setup_logging()
    logger.info("🌿 Paper Catcher: fetch job started")
    result = await IngestionPipeline().run()
    logger.info(f"🎉 Fetch job finished: {result.message}")
    return result


if __name__ == "__main__":
    run_fetch_papers_job()
