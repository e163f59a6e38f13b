import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from papercatcher.api.deps import (
    get_paper_repo,
    get_pipeline,
    get_related_finder,
    get_search_service,
)
from papercatcher.api.schemas.paper import FetchResponse, MutationResponse, PaperResponse
from papercatcher.database.paper_repository import PaperRepository
from papercatcher.jobs.fetch_papers import IngestionPipeline
from papercatcher.model.search import SearchFilters, SortBy
from papercatcher.service.related_service import RelatedPaperFinder
from papercatcher.service.search_service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/papers", tags=["papers"])


@router.get("", response_model=List[PaperResponse])
async def list_papers(
    sort_by: SortBy = Query(default=SortBy.CREATED_AT),
    repo: PaperRepository = Depends(get_paper_repo),
):
    """List papers. relevance / citations have no storage ordering and fall back to createdAt."""
    if sort_by in (SortBy.RELEVANCE, SortBy.CITATIONS):
        sort_by = SortBy.CREATED_AT
    papers = await repo.list(sort_by)
    return PaperResponse.from_papers(papers)


@router.get("/search", response_model=List[PaperResponse])
async def search_papers(
    query: Optional[str] = Query(default=None),
    author: Optional[str] = Query(default=None),
    start_date: Optional[int] = Query(default=None, description="epoch millis, inclusive"),
    end_date: Optional[int] = Query(default=None, description="epoch millis, inclusive"),
    category: Optional[str] = Query(default=None),
    sort_by: SortBy = Query(default=SortBy.CREATED_AT),
    service: SearchService = Depends(get_search_service),
):
    filters = SearchFilters(
        author=author,
        start_date=start_date,
        end_date=end_date,
        category=category,
    )
    try:
        papers = await service.search(query, filters, sort_by)
    except Exception as e:
        logger.error(f"Error searching papers: {e}")
        return []
    return PaperResponse.from_papers(papers)


@router.get("/categories", response_model=List[str])
async def list_categories(
    service: SearchService = Depends(get_search_service),
):
    try:
        return await service.categories()
    except Exception as e:
        logger.error(f"Error fetching categories: {e}")
        return []


@router.post("/fetch", response_model=FetchResponse)
async def fetch_papers(
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """Run one ingestion pass over all active keywords."""
    result = await pipeline.run()
    return FetchResponse(**result.model_dump())


@router.post("/retranslate-all", response_model=FetchResponse)
async def retranslate_all(
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    result = await pipeline.retranslate_all()
    return FetchResponse(**result.model_dump())


@router.get("/{paper_id}", response_model=PaperResponse)
async def get_paper(
    paper_id: int,
    repo: PaperRepository = Depends(get_paper_repo),
):
    paper = await repo.get_paper_by_id(paper_id)
    if not paper:
        raise HTTPException(status_code=404, detail="Paper not found")
    return PaperResponse.from_paper(paper)


@router.delete("/{paper_id}", response_model=MutationResponse)
async def delete_paper(
    paper_id: int,
    repo: PaperRepository = Depends(get_paper_repo),
):
    deleted = await repo.delete_paper(paper_id)
    return MutationResponse(success=deleted)


@router.post("/{paper_id}/retranslate", response_model=MutationResponse)
async def retranslate_paper(
    paper_id: int,
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    result = await pipeline.retranslate(paper_id)
    return MutationResponse(**result.model_dump())


@router.get("/{paper_id}/related", response_model=List[PaperResponse])
async def related_papers(
    paper_id: int,
    limit: Optional[int] = Query(default=None, ge=1, le=50),
    finder: RelatedPaperFinder = Depends(get_related_finder),
):
    papers = await finder.find_related(paper_id, limit)
    return PaperResponse.from_papers(papers)
