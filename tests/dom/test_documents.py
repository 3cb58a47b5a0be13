"""
Tests for the per-document copy cache.
"""

import asyncio

from xtemplate.dom.documents import DocumentCloneCache, document_clone
from tests.infrastructure import tree


def test_copy_is_created_once():
    cache = DocumentCloneCache()
    soup = tree("<p>x</p>")

    async def main():
        return await document_clone(soup, cache), await document_clone(soup, cache)

    first, second = asyncio.run(main())
    assert first is second
    assert first is not soup
    assert str(first) == str(soup)
    assert len(cache) == 1


def test_copy_is_independent():
    cache = DocumentCloneCache()
    soup = tree("<p>x</p>")
    clone = asyncio.run(document_clone(soup, cache))

    soup.p.string = "changed"
    assert str(clone) == "<p>x</p>"


def test_distinct_documents_get_distinct_copies():
    cache = DocumentCloneCache()
    a = tree("<p>x</p>")
    b = tree("<p>x</p>")

    async def main():
        return await document_clone(a, cache), await document_clone(b, cache)

    ca, cb = asyncio.run(main())
    assert ca is not cb
    assert len(cache) == 2
