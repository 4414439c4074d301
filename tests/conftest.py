"""Shared fixtures."""

from __future__ import annotations

import pytest

from feedweaver.models import Feed, Folder, OutlineDocument


SAMPLE_OPML = """<?xml version="1.0" encoding="UTF-8"?>
<opml version="2.0">
  <head>
    <title>Subscriptions</title>
  </head>
  <body>
    <outline text="Tech">
      <outline text="A" type="rss" xmlUrl="u1" htmlUrl="h1"/>
    </outline>
    <outline text="News" xmlUrl="u2"/>
  </body>
</opml>
"""


@pytest.fixture
def sample_opml() -> str:
    return SAMPLE_OPML


@pytest.fixture
def document() -> OutlineDocument:
    """Two folders then two feeds; the second folder never had children.

    0 X/ (0-0 a, 0-1 b), 1 Y/, 2 c, 3 d
    """

    return OutlineDocument(
        nodes=(
            Folder(
                label="X",
                children=(
                    Feed(label="a", feed_url="http://a/feed", site_url="http://a"),
                    Feed(label="b", feed_url="http://b/feed"),
                ),
            ),
            Folder(label="Y"),
            Feed(label="c", feed_url="http://c/feed"),
            Feed(label="d", feed_url="http://d/feed"),
        )
    )
