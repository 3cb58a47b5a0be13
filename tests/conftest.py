from pathlib import Path

import pytest

from tests.infrastructure.file_utils import write, write_json

ARTICLE_TEMPLATE = (
    '<html><body>'
    '<div class="article" data-is=".articles">'
    '<h1 data-is=".title">Title</h1>'
    '<a data-is=".url" href="#">link</a>'
    '<p data-not=".tags">no tags</p>'
    '</div>'
    '</body></html>'
)

ARTICLE_DATA = {
    "articles": [
        {"title": "First", "url": "/first", "tags": ["a"]},
        {"title": "Second", "url": "/second"},
    ]
}


@pytest.fixture
def article_files(tmp_path: Path):
    """Template and data files of a small article list."""
    template = write(tmp_path / "template.html", ARTICLE_TEMPLATE)
    data = write_json(tmp_path / "data.json", ARTICLE_DATA)
    return template, data
