"""
Test data factories and canned upstream responses

Provides a Preview factory with sensible defaults, stand-in extractors
and completion services, and sample payloads for the external APIs.
"""
from datetime import timedelta
from uuid import uuid4

from linkstitcher.errors import ExtractionError
from linkstitcher.models import Preview, utc_today
from linkstitcher.services.extractors import ExtractionResult
from linkstitcher.services.source_classifier import SourceKind


def create_preview(url=None, days_old=0, **kwargs):
    """
    Create a Preview with default test values

    Args:
        url: Preview URL (generates unique URL if None)
        days_old: How many days before today the preview was added
        **kwargs: Additional field overrides

    Returns:
        Preview instance (not stored)
    """
    if url is None:
        url = f"https://example.com/article/{uuid4()}"

    defaults = {
        'title': "Test Article Title",
        'summary': "A test summary about functional programming in haskell.",
    }
    defaults.update(kwargs)

    return Preview(
        url=url,
        added_date=utc_today() - timedelta(days=days_old),
        **defaults
    )


class StubExtractor:
    """
    Extractor double: sets a title and returns fixed content, or raises.

    Records every URL it was asked to extract.
    """

    def __init__(self, content="Extracted body text.", title="Extracted Title", fail_urls=()):
        self.content = content
        self.title = title
        self.fail_urls = set(fail_urls)
        self.calls = []

    async def extract(self, preview):
        self.calls.append(preview.url)
        if preview.url in self.fail_urls:
            raise ExtractionError("stub failure", url=preview.url)
        preview.title = self.title
        return ExtractionResult(content=self.content)


def stub_extractors(extractor=None):
    """The same StubExtractor for every SourceKind."""
    extractor = extractor or StubExtractor()
    return {kind: extractor for kind in SourceKind}


class StubCompletion:
    """Completion service double returning a fixed response, or raising."""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


ARXIV_ATOM = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xmlns:arxiv="http://arxiv.org/schemas/atom">
  <title type="html">ArXiv Query: id_list=2401.00001</title>
  <id>http://arxiv.org/api/query</id>
  <updated>2024-01-03T00:00:00-05:00</updated>
  <entry>
    <id>http://arxiv.org/abs/2401.00001v1</id>
    <updated>2024-01-02T10:00:00Z</updated>
    <published>2024-01-01T09:30:00Z</published>
    <title>Gradual Effects for Functional Programs</title>
    <summary>We present a type system for gradual effects in functional programs.</summary>
    <author>
      <name>Ada Lovelace</name>
    </author>
    <author>
      <name>Alan Turing</name>
    </author>
    <arxiv:comment>12 pages</arxiv:comment>
    <link href="http://arxiv.org/abs/2401.00001v1" rel="alternate" type="text/html"/>
    <link title="pdf" href="http://arxiv.org/pdf/2401.00001v1" rel="related" type="application/pdf"/>
    <arxiv:primary_category term="cs.PL" scheme="http://arxiv.org/schemas/atom"/>
    <category term="cs.PL" scheme="http://arxiv.org/schemas/atom"/>
    <category term="cs.LO" scheme="http://arxiv.org/schemas/atom"/>
  </entry>
</feed>
"""

ARXIV_EMPTY = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title type="html">ArXiv Query: id_list=0000.00000</title>
  <id>http://arxiv.org/api/query</id>
  <updated>2024-01-03T00:00:00-05:00</updated>
</feed>
"""

HACKERNEWS_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Hacker News: Best</title>
    <link>https://news.ycombinator.com/best</link>
    <description>Hacker News RSS</description>
    <item>
      <title>Why haskell laziness matters</title>
      <link>https://example.com/haskell-laziness</link>
      <description>An essay on haskell and lazy evaluation.</description>
      <pubDate>Mon, 01 Jan 2024 10:00:00 +0000</pubDate>
    </item>
    <item>
      <title>Gardening tips</title>
      <link>https://example.com/gardening</link>
      <description>How to grow tomatoes.</description>
      <pubDate>Mon, 01 Jan 2024 11:00:00 +0000</pubDate>
      <category>garden</category>
      <category>plants</category>
    </item>
    <item>
      <title>No link here</title>
      <description>This entry has no link.</description>
    </item>
  </channel>
</rss>
"""

ARTICLE_HTML = """<html>
<head>
  <title>Example Page</title>
  <meta property="article:published_time" content="2024-01-05T08:00:00Z">
</head>
<body>
  <nav>Home | About | Contact</nav>
  <article>
    <h1>Example Page</h1>
    <p>Compilers translate programs written in one language into another language, and they have done so for decades.</p>
    <p>Modern compilers perform many optimizations, such as inlining, constant folding, and dead code elimination.</p>
  </article>
</body>
</html>
"""
