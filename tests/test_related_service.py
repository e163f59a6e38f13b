from papercatcher.service.related_service import RelatedPaperFinder, rank_related, related_score

from tests.conftest import make_paper, make_raw


def test_score_combines_keyword_title_and_authors() -> None:
    reference = make_paper(
        1,
        title="Graph Neural Networks for Molecules",
        authors="Jane Doe, John Smith",
        origin_keyword="gnn",
    )
    candidate = make_paper(
        2,
        title="Scalable graph networks",
        authors="Jane Doe-Smith",
        origin_keyword="gnn",
    )

    # same keyword + "graph" + "networks" + one shared author
    assert related_score(reference, candidate) == 10 + 2 * 2 + 5


def test_short_tokens_are_ignored() -> None:
    reference = make_paper(1, title="On the use of AI", authors="A")
    candidate = make_paper(2, title="the use of AI", authors="B")
    assert related_score(reference, candidate) == 0


def test_rank_excludes_self_and_unrelated() -> None:
    reference = make_paper(1, title="Transformer models", origin_keyword="nlp")
    papers = [
        reference,
        make_paper(2, title="Unrelated", authors="Nobody", origin_keyword="vision"),
        make_paper(3, title="Transformer models for code", origin_keyword="nlp"),
        make_paper(4, title="Other", origin_keyword="nlp"),
    ]

    ranked = rank_related(reference, papers, limit=5)

    assert [p.id for p in ranked] == [3, 4]


def test_rank_respects_limit_and_is_stable() -> None:
    reference = make_paper(1, title="x", origin_keyword="kw", authors="Solo")
    papers = [make_paper(i, title="y", origin_keyword="kw", authors="Other") for i in range(2, 8)]

    ranked = rank_related(reference, papers, limit=3)

    assert [p.id for p in ranked] == [2, 3, 4]


async def test_find_related_invalid_ids(paper_repo) -> None:
    finder = RelatedPaperFinder(paper_repo)
    assert await finder.find_related(0) == []
    assert await finder.find_related(-1) == []
    assert await finder.find_related(999) == []


async def test_find_related_from_storage(paper_repo) -> None:
    first = await paper_repo.insert_paper(
        make_raw("2401.00001", title="Diffusion models", authors="Ann Lee", origin_keyword="diffusion")
    )
    second = await paper_repo.insert_paper(
        make_raw("2401.00002", title="Fast diffusion sampling", authors="Bo Chen", origin_keyword="diffusion")
    )
    await paper_repo.insert_paper(
        make_raw("2401.00003", title="Robot arms", authors="Cy Park", origin_keyword="robotics")
    )

    related = await RelatedPaperFinder(paper_repo).find_related(first.id, limit=5)

    assert [p.id for p in related] == [second.id]


async def test_find_related_explicit_zero_limit(paper_repo) -> None:
    first = await paper_repo.insert_paper(make_raw("2401.00001", origin_keyword="diffusion"))
    await paper_repo.insert_paper(make_raw("2401.00002", origin_keyword="diffusion"))

    finder = RelatedPaperFinder(paper_repo)

    assert await finder.find_related(first.id, limit=0) == []
    assert len(await finder.find_related(first.id)) == 1
