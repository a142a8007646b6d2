"""Property-based tests for the skip policy and the output planner."""

from __future__ import annotations

import pytest

pytest.importorskip("hypothesis")
from hypothesis import given, settings  # type: ignore  # noqa: E402
from hypothesis import strategies as st

from pipeline.classification import should_skip
from pipeline.planner import plan_document
from tests.factories import make_document

_TAG_NAME = st.one_of(
    st.sampled_from(("fine", "legal", "private", "invoice", "v2", "Legal", "tax", "x2y")),
    st.from_regex(r"[A-Za-z0-9 _-]{1,16}", fullmatch=True),
)
_TAGS = st.lists(_TAG_NAME, max_size=6).map(tuple)
_ARCHIVE_NAME = st.from_regex(r"[a-z0-9_-]{1,12}(/[a-z0-9_-]{1,12}){0,2}\.pdf", fullmatch=True)


def _expected_skip(tags: tuple[str, ...]) -> bool:
    return any(t in {"fine", "legal", "private"} or t.endswith("2") for t in tags)


@settings(max_examples=200, deadline=None, database=None)
@given(tags=_TAGS)
def test_should_skip_matches_reference_rule(tags: tuple[str, ...]) -> None:
    """Skipping depends only on exact exclusion matches and the '2' suffix."""
    assert should_skip(make_document(tags=tags)) is _expected_skip(tags)


@settings(max_examples=200, deadline=None, database=None)
@given(tags=_TAGS)
def test_should_skip_ignores_tag_order(tags: tuple[str, ...]) -> None:
    forward = make_document(tags=tags)
    backward = make_document(tags=tuple(reversed(tags)))
    assert should_skip(forward) is should_skip(backward)


@settings(max_examples=200, deadline=None, database=None)
@given(tags=_TAGS, archive_name=_ARCHIVE_NAME, correspondent=st.one_of(st.none(), st.just("Acme")))
def test_plan_links_all_point_at_canonical_copy(
    tags: tuple[str, ...], archive_name: str, correspondent: str | None
) -> None:
    plan = plan_document(make_document(archive_name=archive_name, tags=tags, correspondent=correspondent))

    assert plan.canonical.as_posix() == f"files/{archive_name}"
    assert len(plan.links) == 2 + len(tags)
    ops = plan.operations()
    assert ops[0].kind == "copy"
    assert ops[0].target.as_posix() == archive_name
    for op in ops[1:]:
        assert op.kind == "link"
        assert op.target == plan.canonical
