from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config import Config
from ..database.paper_repository import PaperRepository
from ..model.paper import Paper

logger = logging.getLogger(__name__)

SAME_KEYWORD = 10
TITLE_TOKEN = 2
SHARED_AUTHOR = 5
MIN_TOKEN_LENGTH = 4


def _title_tokens(paper: Paper) -> List[str]:
    return paper.display_title.lower().split()


def _author_names(paper: Paper) -> List[str]:
    return [name.strip().lower() for name in (paper.authors or "").split(",") if name.strip()]


def related_score(reference: Paper, candidate: Paper) -> int:
    score = 0

    if (
        reference.origin_keyword
        and candidate.origin_keyword
        and reference.origin_keyword == candidate.origin_keyword
    ):
        score += SAME_KEYWORD

    candidate_tokens = _title_tokens(candidate)
    for token in _title_tokens(reference):
        if len(token) < MIN_TOKEN_LENGTH:
            continue
        if any(token in other or other in token for other in candidate_tokens):
            score += TITLE_TOKEN

    candidate_authors = _author_names(candidate)
    for name in _author_names(reference):
        if any(name in other or other in name for other in candidate_authors):
            score += SHARED_AUTHOR

    return score


def rank_related(reference: Paper, candidates: Sequence[Paper], limit: int = 5) -> List[Paper]:
    scored = []
    for candidate in candidates:
        if candidate.id == reference.id:
            continue
        score = related_score(reference, candidate)
        if score > 0:
            scored.append((score, candidate))

    scored.sort(key=lambda item: item[0], reverse=True)
    return [paper for _, paper in scored[:limit]]


class RelatedPaperFinder:
    def __init__(self, repo: Optional[PaperRepository] = None):
        self.repo = repo or PaperRepository()

    async def find_related(self, paper_id: int, limit: Optional[int] = None) -> List[Paper]:
        """
        Best effort: [] for an invalid or unknown id, never raises.
        """
        if limit is None:
            limit = Config.related_limit
        if not paper_id or paper_id <= 0:
            return []

        try:
            reference = await self.repo.get_paper_by_id(paper_id)
            if not reference:
                return []
            candidates = await self.repo.list()
        except Exception as e:
            logger.error(f"Error fetching related papers for {paper_id}: {e}")
            return []

        return rank_related(reference, candidates, limit)
