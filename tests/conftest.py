from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from papercatcher.database.db.models import Base
from papercatcher.database.favorite_repository import FavoriteRepository
from papercatcher.database.keyword_repository import KeywordRepository
from papercatcher.database.paper_repository import PaperRepository
from papercatcher.model.paper import Paper, RawPaper, TranslationResult


SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xmlns:arxiv="http://arxiv.org/schemas/atom">
  <title type="html">ArXiv Query: search_query=all:machine learning</title>
  <entry>
    <id>http://arxiv.org/abs/2401.00001v2</id>
    <updated>2024-01-02T00:00:00Z</updated>
    <published>2024-01-01T00:00:00Z</published>
    <title>Scaling   Laws for
      Machine Learning</title>
    <summary>  We study scaling
  laws.  </summary>
    <author><name>Jane Doe</name></author>
    <author><name> John Smith </name></author>
    <arxiv:primary_category term="cs.LG" scheme="http://arxiv.org/schemas/atom"/>
    <link href="http://arxiv.org/abs/2401.00001v2" rel="alternate" type="text/html"/>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/2401.00002v1</id>
    <published>2024-01-03T12:30:00Z</published>
    <title>No Category Paper</title>
    <summary>Abstract two.</summary>
    <author><name>Alice Johnson</name></author>
  </entry>
  <entry>
    <id></id>
    <title>Broken entry without identifier</title>
    <summary>Should be dropped.</summary>
  </entry>
</feed>
"""


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def paper_repo(session_factory) -> PaperRepository:
    return PaperRepository(session_factory)


@pytest.fixture
def keyword_repo(session_factory) -> KeywordRepository:
    return KeywordRepository(session_factory)


@pytest.fixture
def favorite_repo(session_factory) -> FavoriteRepository:
    return FavoriteRepository(session_factory)


def make_raw(source_id: str, **overrides) -> RawPaper:
    data = dict(
        source_id=source_id,
        title=f"Paper {source_id}",
        authors="Test Author",
        abstract="Test abstract",
        published_at=1704067200000,
        source_url=f"https://arxiv.org/abs/{source_id}",
        pdf_url=f"https://arxiv.org/pdf/{source_id}.pdf",
        category="cs.AI",
        origin_keyword="machine learning",
    )
    data.update(overrides)
    return RawPaper(**data)


_BASE_TIME = datetime(2024, 6, 1, 12, 0, 0)


def make_paper(paper_id: int, **overrides) -> Paper:
    data = dict(
        id=paper_id,
        source_id=f"2401.{paper_id:05d}",
        title=f"Paper {paper_id}",
        authors="Test Author",
        abstract="Test abstract",
        source_url=f"https://arxiv.org/abs/2401.{paper_id:05d}",
        created_at=_BASE_TIME + timedelta(minutes=paper_id),
        updated_at=_BASE_TIME + timedelta(minutes=paper_id),
    )
    data.update(overrides)
    return Paper(**data)


class FakeFeedClient:
    """Returns canned RawPapers per keyword; raises for keywords mapped to an exception."""

    def __init__(self, results: Dict[str, object]):
        self.results = results
        self.calls: List[str] = []

    async def fetch(self, keyword: str, max_results: Optional[int] = None) -> List[RawPaper]:
        self.calls.append(keyword)
        result = self.results.get(keyword, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class FakeTranslator:
    def __init__(self, result: Optional[TranslationResult] = None, error: Optional[Exception] = None):
        self.result = result if result is not None else TranslationResult(
            title_translated="翻訳タイトル",
            abstract_translated="翻訳要旨",
        )
        self.error = error
        self.calls: List[str] = []

    async def translate(self, title: str, abstract: str) -> TranslationResult:
        self.calls.append(title)
        if self.error is not None:
            raise self.error
        return self.result
