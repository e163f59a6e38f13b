from papercatcher.model.search import SearchFilters, SortBy
from papercatcher.service.search_service import (
    SearchService,
    filter_papers,
    relevance_score,
    search,
    sort_papers,
)

from tests.conftest import make_paper, make_raw


def _corpus():
    return [
        make_paper(
            1,
            title="Machine Learning Fundamentals",
            title_translated="機械学習の基礎",
            abstract="An introduction to machine learning concepts and algorithms",
            authors="John Smith, Jane Doe",
            published_at=1705276800000,  # 2024-01-15
            category="cs.LG",
            citation_count=50,
        ),
        make_paper(
            2,
            title="Deep Learning Applications",
            title_translated="深層学習の応用",
            abstract="Practical applications of deep learning in computer vision",
            authors="Alice Johnson, Bob Wilson",
            published_at=1707523200000,  # 2024-02-10
            category="cs.CV",
            citation_count=200,
        ),
        make_paper(
            3,
            title="Natural Language Processing",
            abstract="Recent advances in NLP using transformer models",
            authors="John Smith, Carol Davis",
            published_at=1709596800000,  # 2024-03-05
            category="cs.CL",
        ),
    ]


# =========================================================
# Relevance
# =========================================================

def test_relevance_weights_are_additive() -> None:
    paper = make_paper(
        1,
        title="Graph networks",
        title_translated="graph graph",
        abstract="graph methods on a graph",
        abstract_translated="graph",
        authors="Graph Lab",
    )
    # 100 translated hit + 100 title hit + 50*2 + 10*(1+2) + 30 author
    assert relevance_score(paper, "Graph") == 100 + 100 + 100 + 30 + 30


def test_relevance_more_occurrences_rank_higher() -> None:
    a = make_paper(1, title="x", title_translated="agents and agents")
    b = make_paper(2, title="x", title_translated="agents")

    assert relevance_score(a, "agents") > relevance_score(b, "agents")
    assert relevance_score(a, "agents") - relevance_score(b, "agents") == 50


def test_relevance_treats_query_literally() -> None:
    paper = make_paper(1, title="C++ templates", abstract="c++ and c++", title_translated="")
    assert relevance_score(paper, "c++") == 100 + 20
    assert relevance_score(paper, ".*") == 0


def test_relevance_sort_is_stable_for_ties() -> None:
    papers = [
        make_paper(1, title="learning one"),
        make_paper(2, title="learning two"),
        make_paper(3, title="learning learning", title_translated="learning"),
    ]
    ordered = sort_papers(papers, SortBy.RELEVANCE, "learning")
    assert [p.id for p in ordered] == [3, 1, 2]


def test_relevance_without_query_keeps_order() -> None:
    papers = [make_paper(2), make_paper(1), make_paper(3)]
    assert [p.id for p in sort_papers(papers, SortBy.RELEVANCE, "  ")] == [2, 1, 3]


# =========================================================
# Filters
# =========================================================

def test_query_matches_title_translation_abstract_and_authors() -> None:
    corpus = _corpus()
    assert [p.id for p in filter_papers(corpus, "machine")] == [1]
    assert [p.id for p in filter_papers(corpus, "機械学習")] == [1]
    assert [p.id for p in filter_papers(corpus, "TRANSFORMER")] == [3]
    assert [p.id for p in filter_papers(corpus, "john smith")] == [1, 3]
    assert filter_papers(corpus, "nonexistent-paper-title-xyz") == []


def test_filter_conjunction() -> None:
    results = search(_corpus(), "learning", SearchFilters(category="cs.LG"), SortBy.RELEVANCE)

    assert [p.id for p in results] == [1]
    for paper in results:
        assert paper.category == "cs.LG"
        assert "learning" in (paper.title + paper.abstract).lower()


def test_author_and_category_filters() -> None:
    results = filter_papers(_corpus(), None, SearchFilters(author="john smith", category="CS.cl"))
    assert [p.id for p in results] == [3]


def test_category_is_exact_match() -> None:
    assert filter_papers(_corpus(), None, SearchFilters(category="cs")) == []


def test_date_range_is_inclusive() -> None:
    corpus = _corpus()
    start = 1705276800000
    end = 1707523200000

    inclusive = filter_papers(corpus, None, SearchFilters(start_date=start, end_date=end))
    assert [p.id for p in inclusive] == [1, 2]

    tight = filter_papers(corpus, None, SearchFilters(start_date=start + 1, end_date=end - 1))
    assert tight == []


def test_missing_published_at_counts_as_zero() -> None:
    undated = make_paper(9, published_at=None)
    assert filter_papers([undated], None, SearchFilters(start_date=0, end_date=10)) == [undated]
    assert filter_papers([undated], None, SearchFilters(start_date=1)) == []


def test_blank_filters_are_ignored() -> None:
    filters = SearchFilters(author="   ", category="")
    assert len(filter_papers(_corpus(), "", filters)) == 3


# =========================================================
# Sorting
# =========================================================

def test_sort_by_created_at_desc() -> None:
    assert [p.id for p in sort_papers(_corpus(), SortBy.CREATED_AT)] == [3, 2, 1]


def test_sort_by_published_at_missing_last() -> None:
    papers = _corpus() + [make_paper(4, published_at=None)]
    assert [p.id for p in sort_papers(papers, SortBy.PUBLISHED_AT)] == [3, 2, 1, 4]


def test_sort_by_journal_missing_first() -> None:
    papers = _corpus() + [make_paper(4, category=None)]
    assert [p.id for p in sort_papers(papers, SortBy.JOURNAL)] == [4, 3, 2, 1]


def test_sort_by_citations_missing_as_zero() -> None:
    assert [p.id for p in sort_papers(_corpus(), SortBy.CITATIONS)] == [2, 1, 3]


def test_sort_accepts_plain_strings() -> None:
    assert [p.id for p in sort_papers(_corpus(), "citations")] == [2, 1, 3]


# =========================================================
# Service over storage
# =========================================================

async def test_search_service_reads_repository(paper_repo) -> None:
    await paper_repo.insert_paper(make_raw("2401.00001", title="Machine Learning Basics", category="cs.LG"))
    await paper_repo.insert_paper(make_raw("2401.00002", title="Advanced Machine Learning", category="cs.LG"))
    await paper_repo.insert_paper(make_raw("2401.00003", title="Deep Learning Applications", category="cs.CV"))

    service = SearchService(paper_repo)

    results = await service.search("machine", SearchFilters(category="cs.LG"), SortBy.RELEVANCE)
    assert {p.source_id for p in results} == {"2401.00001", "2401.00002"}
    # equal score, newest first
    assert results[0].source_id == "2401.00002"

    assert await service.categories() == ["cs.CV", "cs.LG"]
