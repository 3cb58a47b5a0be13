"""
Tests for data-apply fragment copying.
"""

import copy

from xtemplate.engine.apply import apply_templates
from xtemplate.engine.diagnostics import SELECTOR, Diagnostics
from tests.infrastructure import tree

DOC = (
    '<html><body>'
    '<div data-template="item"><b>x</b></div>'
    '<ul data-apply=":root [data-template=item]"></ul>'
    '</body></html>'
)


def test_fragments_come_from_document_copy():
    soup = tree(DOC)
    clone = copy.copy(soup)
    soup.div.b.string = "changed"

    added = apply_templates(soup.ul, clone, Diagnostics())

    assert added == 1
    assert str(soup.ul) == '<ul data-apply=":root [data-template=item]"><div data-template="item"><b>x</b></div></ul>'


def test_without_directive_nothing_is_added():
    soup = tree("<ul></ul>")
    assert apply_templates(soup.ul, copy.copy(soup), Diagnostics()) == 0


def test_invalid_selector_is_reported():
    soup = tree('<ul data-apply="li:nosuch"></ul>')
    diagnostics = Diagnostics()

    assert apply_templates(soup.ul, copy.copy(soup), diagnostics) == 0
    assert diagnostics.problems[0].kind == SELECTOR
