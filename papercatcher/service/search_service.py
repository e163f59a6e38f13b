"""
Search, filter and rank stored papers.

Filtering always runs before sorting. The relevance score is a fixed
additive heuristic and is only used for ordering, never stored.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..database.paper_repository import PaperRepository
from ..model.paper import Paper
from ..model.search import SearchFilters, SortBy

logger = logging.getLogger(__name__)

# relevance weights
TITLE_TRANSLATED_HIT = 100
TITLE_HIT = 100
TITLE_TRANSLATED_OCCURRENCE = 50
ABSTRACT_OCCURRENCE = 10
AUTHOR_HIT = 30


def _lower(value: Optional[str]) -> str:
    return (value or "").lower()


def matches_query(paper: Paper, query: str) -> bool:
    q = query.lower()
    fields = (
        paper.title_translated,
        paper.title,
        paper.abstract_translated,
        paper.abstract,
        paper.authors,
    )
    return any(q in _lower(field) for field in fields)


def matches_filters(paper: Paper, filters: SearchFilters) -> bool:
    if filters.author and filters.author.lower() not in _lower(paper.authors):
        return False

    published = paper.published_at or 0
    if filters.start_date is not None and published < filters.start_date:
        return False
    if filters.end_date is not None and published > filters.end_date:
        return False

    if filters.category and _lower(paper.category) != filters.category.lower():
        return False

    return True


def relevance_score(paper: Paper, query: str) -> int:
    """
    +100 translated title contains q
    +100 original title contains q
    +50  per occurrence of q in translated title
    +10  per occurrence of q in either abstract
    +30  authors contain q
    """
    q = query.lower()
    if not q:
        return 0

    title_translated = _lower(paper.title_translated)
    title = _lower(paper.title)

    score = 0
    if q in title_translated:
        score += TITLE_TRANSLATED_HIT
    if q in title:
        score += TITLE_HIT

    # str.count is a literal, non-overlapping count
    score += title_translated.count(q) * TITLE_TRANSLATED_OCCURRENCE
    score += (
        _lower(paper.abstract_translated).count(q) + _lower(paper.abstract).count(q)
    ) * ABSTRACT_OCCURRENCE

    if q in _lower(paper.authors):
        score += AUTHOR_HIT

    return score


def filter_papers(
    papers: Iterable[Paper],
    query: Optional[str] = None,
    filters: Optional[SearchFilters] = None,
) -> List[Paper]:
    query = (query or "").strip()
    result = []
    for paper in papers:
        if query and not matches_query(paper, query):
            continue
        if filters and not matches_filters(paper, filters):
            continue
        result.append(paper)
    return result


def sort_papers(
    papers: List[Paper],
    sort_by: SortBy = SortBy.CREATED_AT,
    query: Optional[str] = None,
) -> List[Paper]:
    """
    Stable sort; equal keys keep their incoming order.
    """
    sort_by = SortBy(sort_by)

    if sort_by == SortBy.PUBLISHED_AT:
        return sorted(papers, key=lambda p: p.published_at or 0, reverse=True)
    if sort_by == SortBy.JOURNAL:
        return sorted(papers, key=lambda p: p.category or "")
    if sort_by == SortBy.CITATIONS:
        return sorted(papers, key=lambda p: p.citation_count or 0, reverse=True)
    if sort_by == SortBy.RELEVANCE:
        query = (query or "").strip()
        if not query:
            return list(papers)
        return sorted(papers, key=lambda p: relevance_score(p, query), reverse=True)

    return sorted(papers, key=lambda p: p.created_at, reverse=True)


def search(
    papers: Iterable[Paper],
    query: Optional[str] = None,
    filters: Optional[SearchFilters] = None,
    sort_by: SortBy = SortBy.CREATED_AT,
) -> List[Paper]:
    return sort_papers(filter_papers(papers, query, filters), sort_by, query)


class SearchService:
    """
    Read path over PaperRepository.
    """

    def __init__(self, repo: Optional[PaperRepository] = None):
        self.repo = repo or PaperRepository()

    async def search(
        self,
        query: Optional[str] = None,
        filters: Optional[SearchFilters] = None,
        sort_by: SortBy = SortBy.CREATED_AT,
    ) -> List[Paper]:
        # base order is createdAt desc so relevance ties stay newest-first
        papers = await self.repo.list(SortBy.CREATED_AT)
        results = search(papers, query, filters, sort_by)
        logger.debug(f"search query={query!r} sort_by={sort_by} -> {len(results)} results")
        return results

    async def categories(self) -> List[str]:
        return await self.repo.list_categories()
