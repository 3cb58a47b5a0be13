"""
Behaviour of directives and built-in renderers on complete documents.
"""

import re

import pytest

from tests.infrastructure import render_html, tree


def assert_match(template, data, pattern):
    html = render_html(template, data)
    assert re.search(pattern, html), f"{html!r} with {data!r} should match {pattern}"


def assert_no_match(template, data, pattern):
    html = render_html(template, data)
    assert not re.search(pattern, html), f"{html!r} with {data!r} should not match {pattern}"


def test_empty_data_keeps_document():
    template = "<html><head></head><body></body></html>"
    assert render_html(template, {}) == template


class TestDataIf:
    TEMPLATE = '<html><body><div data-if=".foo">TEST</div></body></html>'

    def test_present(self):
        assert_match(self.TEMPLATE, {"foo": {"name": "x"}}, r"TEST")

    @pytest.mark.parametrize("data", [{"bar": {}}, {"foo": False}, {"foo": None}])
    def test_absent_or_never_matching(self, data):
        assert_no_match(self.TEMPLATE, data, r"TEST")
        assert_no_match(self.TEMPLATE, data, r"(?i)div")

    def test_and_condition(self):
        template = '<html><body><div data-if=".foo and .bar">TEST</div></body></html>'
        assert_match(template, {"foo": {}, "bar": {}}, r"TEST")
        for data in ({"bar": {}}, {"foo": {}}, {}):
            assert_no_match(template, data, r"TEST")
            assert_no_match(template, data, r"(?i)div")


class TestDataNot:
    TEMPLATE = '<html><body><div data-not=".foo">TEST</div></body></html>'

    def test_absent(self):
        assert_match(self.TEMPLATE, {"bar": {}}, r"TEST")

    def test_present(self):
        assert_no_match(self.TEMPLATE, {"foo": {}}, r"TEST")
        assert_no_match(self.TEMPLATE, {"foo": {}}, r"(?i)div")


class TestPrimitiveValues:
    TEMPLATE = '<html><body><div data-is=".foo">TEST</div></body></html>'

    @pytest.mark.parametrize("value, expected", [
        (10, "<div>10</div>"),
        (-10, "<div>-10</div>"),
        (10.5, "<div>10.5</div>"),
        (0, "<div>0</div>"),
        ("bar", "<div>bar</div>"),
    ])
    def test_value_replaces_text(self, value, expected):
        assert expected in render_html(self.TEMPLATE, {"foo": value})

    def test_missing_value_removes_element(self):
        assert_no_match(self.TEMPLATE, {"bar": {}}, r"TEST")
        assert_no_match(self.TEMPLATE, {"bar": {}}, r"(?i)div")


class TestDates:

    @pytest.mark.parametrize("value", [1340802266807, "2012.06.27"])
    def test_default_locale(self, value):
        template = '<html><body><div data-is=".theDate">TEST</div></body></html>'
        assert_match(template, {"theDate": value}, r"06/27/2012")

    @pytest.mark.parametrize("value", [1340802266807, "2012.06.27"])
    def test_nearest_language_wins(self, value):
        template = '<html lang="en"><body lang="de"><div data-is=".theDate">TEST</div></body></html>'
        assert_match(template, {"theDate": value}, r"27\.06\.2012")


class TestElementRenderers:

    def test_link_href(self):
        template = '<html><body><a data-is=".url" href="#" >TEST</a></body></html>'
        assert_match(template, {"url": "/test"}, r'href="/test"')

    def test_textarea_text(self):
        template = '<html><body><textarea data-is=".text">TEST</textarea></body></html>'
        assert_match(template, {"text": "mytext"}, r">\s*mytext<")

    def test_image_src(self):
        template = '<html><body><img data-is=".url" src="#" ></img></body></html>'
        assert_match(template, {"url": "/test"}, r'src="/test"')

    @pytest.mark.parametrize("template", [
        '<html><body><input data-is=".foo" ></input></body></html>',
        '<html><body><input type="text" data-is=".foo" ></input></body></html>',
    ])
    def test_input_value(self, template):
        assert_match(template, {"foo": "bar"}, r'value="bar"')


class TestRepetition:
    NESTED = '<html><body><div data-is=".result" >RESULT:<span data-is=".name">TEST</span></div></body></html>'

    def test_key_found_at_every_depth(self):
        template = '<html><body><div data-is=".foo">TEST</div></body></html>'
        html = render_html(template, {"foo": [{"foo": "bar"}, {"blub": "baz2"}]})
        assert html.count("TEST") == 2
        assert "<div>bar</div>" in html

    def test_independent_results(self):
        data = {"obj": {"result": {"name": "NAME1"}}, "obj2": {"result": {"name": "NAME2"}}}
        assert_match(self.NESTED, data, r"NAME1</span></div>.*NAME2</span></div>")

    def test_result_array(self):
        data = {"result": [{"name": "NAME1"}, {"name": "NAME2"}]}
        assert_match(self.NESTED, data, r"NAME1</span></div>.*NAME2</span></div>")

    def test_empty_array(self):
        assert_no_match(self.NESTED, {"result": []}, r"RESULT")


class TestTreeData:
    TEMPLATE = (
        '<html><body><h1 data-is="h1">H1</h1>'
        '<section data-is="section">SECTION<p data-is="p">P</p></section></body></html>'
    )

    def test_heading(self):
        data = tree("<html><body><h1>DATA-H1</h1></body></html>")
        assert_match(self.TEMPLATE, data, r"DATA-H1")

    def test_section_with_paragraphs(self):
        data = tree("<html><body><section>DATA-SECTION<p>DATA-X1</p><p>DATA-X2</p></section></body></html>")
        html = render_html(self.TEMPLATE, data)
        assert re.search(r"DATA-SECTION([^X]+)X1([^X]+)X2", html)
        assert "<h1" not in html


TEXTS_TEMPLATE = (
    '<html><body>'
    '<p data-option="texts" data-is="p" data-exclude-texts="true" >'
    '<span data-option="invisible" data-is="> span, > strong" data-exclude-texts="true" data-template="content" >'
    '<span data-option="self invisible" data-is="> span.text"></span>'
    '<strong data-option="self" data-is="> strong" data-exclude-texts="true" '
    'data-apply=":root [data-template=\'content\']"></strong>'
    '</span>'
    '</p>'
    '</body></html>'
)


class TestTextSpans:

    def test_texts_and_nested_elements(self):
        data = tree("<html><p>1<strong>2</strong>3<strong>4</strong>5</p>")
        assert_match(TEXTS_TEMPLATE, data, r">1<strong>2</strong>3<strong>4</strong>5<")

    def test_data_attributes_of_data_are_kept(self):
        data = tree('<html><p data-if=".foo">1<strong data-is=".bar">2</strong>3<strong>4</strong>5</p>')
        assert_match(TEXTS_TEMPLATE, data, r'data-if="\.foo".*data-is="\.bar"')
