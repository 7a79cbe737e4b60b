"""Shared pytest fixtures: feed samples and an in-memory fetcher."""

import asyncio
from collections.abc import Callable

import pytest

from feedscope.exceptions import FetchError


class FakeFetcher:
    """In-memory Fetcher that records the URLs it was asked for."""

    def __init__(self, pages: dict[str, str]):
        self.pages = pages
        self.calls: list[str] = []

    async def fetch(self, url: str, cancel: asyncio.Event | None = None) -> str:
        self.calls.append(url)
        if cancel is not None and cancel.is_set():
            raise FetchError(url, "cancelled")
        # Yield so concurrently explored branches interleave
        await asyncio.sleep(0)
        if url not in self.pages:
            raise FetchError(url, "404 Not Found")
        return self.pages[url]


def make_channel(title: str, description: str = "", items: str = "") -> str:
    return f"""
  <?xml version="1.0" encoding="utf-8"?>
  <rss version="2.0">
  <channel>
  <title>{title}</title>
  <link>https://link.com</link>
  <description>{description}</description>
  <language>cs</language>
  {items}
  </channel>
  </rss>
  """


def make_page(*hrefs: str, head: str = "") -> str:
    anchors = "\n".join(f'<a href="{href}">rss channel</a>' for href in hrefs)
    return f"""<!DOCTYPE html>
<html lang="en">
  <head><title>Page</title>{head}</head>
  <body>
    {anchors}
  </body>
</html>
"""


@pytest.fixture
def fetcher_factory() -> Callable[[dict[str, str]], FakeFetcher]:
    return FakeFetcher


@pytest.fixture
def channel_factory() -> Callable[..., str]:
    return make_channel


@pytest.fixture
def page_factory() -> Callable[..., str]:
    return make_page


# https://www.rssboard.org/files/rss-2.0-sample.xml, with extension elements added to items
SAMPLE_FEED = """
  <rss version="2.0">
    <channel>
      <description>Current headlines from the Dallas Times-Herald newspaper</description>
      <link>https://dallas.example.com</link>
      <title>Dallas Times-Herald</title>
      <category>Media</category>
      <category domain="Newspapers/Regional/United_States">Texas</category>
      <cloud domain="server.example.com" path="/rpc" port="80" protocol="xml-rpc" registerProcedure="cloud.notify" />
      <copyright>Copyright 2006 Dallas Times-Herald</copyright>
      <docs>https://www.rssboard.org/rss-specification</docs>
      <generator>Radio UserLand v8.2.1</generator>
      <image>
        <link>https://dallas.example.com</link>
        <title>Dallas Times-Herald</title>
        <url>https://dallas.example.com/masthead.gif</url>
        <description>Read the Dallas Times-Herald</description>
        <height>32</height>
        <width>96</width>
      </image>
      <language>epo</language>
      <lastBuildDate>Sun, 29 Jan 2006 17:17:44 GMT</lastBuildDate>
      <managingEditor>jlehrer@dallas.example.com (Jim Lehrer)</managingEditor>
      <pubDate>Sun, 29 Jan 2006 05:00:00 GMT</pubDate>
      <rating>(PICS-1.1 "https://www.rsac.org/ratingsv01.html" l by "webmaster@example.com" on "2006.01.29T10:09-0800" r (n 0 s 0 v 0 l 0))</rating>
      <skipDays>
        <day>Saturday</day>
        <day>Sunday</day>
      </skipDays>
      <skipHours>
        <hour>0</hour>
        <hour>1</hour>
        <hour>2</hour>
        <hour>22</hour>
        <hour>23</hour>
      </skipHours>
      <textInput>
        <description>Your aggregator supports the textInput element. What software are you using?</description>
        <link>https://workbench.cadenhead.org/textinput.php</link>
        <name>query</name>
        <title>TextInput Inquiry</title>
      </textInput>
      <ttl>60</ttl>
      <webMaster>bob.brock@dallas.example.com (Bob Brock)</webMaster>
      <item>
        <title>Seventh Heaven! Ryan Hurls Another No Hitter</title>
        <link>https://dallas.example.com/1991/05/02/nolan.htm</link>
        <description>Texas Rangers pitcher Nolan Ryan hurled the seventh no-hitter of his legendary career on Arlington Appreciation Night, defeating the Toronto Blue Jays 3-0. The 44-year-old struck out 16 batters before a crowd of 33,439.</description>
        <guid>https://dallas.example.com/1991/05/02/nolan.htm</guid>
        <enclosure url="https://item.img" type="image/jpeg"/>
        <dc:creator>bob.brock@dallas.example.com</dc:creator>
      </item>
      <item>
        <author>jbb@dallas.example.com (Joe Bob Briggs)</author>
        <category>rec.arts.movies.reviews</category>
        <comments>https://dallas.example.com/feedback/1983/06/joebob.htm</comments>
        <description>I'm headed for France. I wasn't gonna go this year, but then last week "Valley Girl" came out and I said to myself, Joe Bob, you gotta get out of the country for a while.</description>
        <enclosure length="24986239" type="audio/mpeg" url="https://dallas.example.com/joebob_050689.mp3" />
        <guid>https://dallas.example.com/1983/05/06/joebob.htm</guid>
        <link>https://dallas.example.com/1983/05/06/joebob.htm</link>
        <pubDate>Fri, 06 May 1983 09:00:00 CST</pubDate>
        <source url="https://la.example.com/rss.xml">Los Angeles Herald-Examiner</source>
        <title>Joe Bob Goes to the Drive-In</title>
      </item>
      <item>
        <description>I'm headed for France. I wasn't gonna go this year, but then last week &lt;a href="https://www.imdb.com/title/tt0086525/"&gt;Valley Girl&lt;/a&gt; came out and I said to myself, Joe Bob, you gotta get out of the country for a while.</description>
        <guid isPermaLink="false">tag:dallas.example.com,4131:news</guid>
        <media:content url="https://media.content.img" medium="image"/>

      </item>
      <item>
        <description><![CDATA[I'm headed for France. I wasn't gonna go this year, but then last week <a href="https://www.imdb.com/title/tt0086525/">Valley Girl</a> came out and I said to myself, Joe Bob, you gotta get out of the country for a while.]]></description>
        <guid isPermaLink="false">1983-05-06+lifestyle+joebob+2</guid>
        <content:encoded><![CDATA[<img src='https://content.encoded.img'/>]]></content:encoded>
      </item>
    </channel>
  </rss>
  """

NAMESPACED_FEED = """
  <rss>
    <channel>
      <content:encoded>Encoded content</content:encoded>
      <atom:link href="http://dallas.example.com/rss.xml" title="RSS" length="xyz" hreflang="en" rel="self" type="application/rss+xml" />
      <creativeCommons:license>https://www.creativecommons.org/licenses/by-nd/1.0</creativeCommons:license>
      <item>
        <creativeCommons:license>https://www.creativecommons.org/licenses/by-nd/1.0</creativeCommons:license>
        <trackback:ping>https://dallas.example.com/trackback/tb.php?id=1983/06/joebob2.htm</trackback:ping>
        <trackback:about>https://www.imdb.com/title/tt0086525</trackback:about>
      </item>
      <item>
        <trackback:about rdf:resource="http://ekzemplo.com/tb.cgi?tb_id=180"/>
        <trackback:ping rdf:resource="http://ekzemplo.com/tb.cgi?tb_id=180"/>
      </item>
    </channel>
  </rss>
  """

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <title>Example Atom</title>
  <subtitle>Atom subtitle</subtitle>
  <link rel="self" href="https://example.org/atom.xml"/>
  <link href="https://example.org/"/>
  <updated>2003-12-13T18:30:02Z</updated>
  <rights>Copyright 2003 Example</rights>
  <author><name>John Doe</name></author>
  <logo>https://example.org/logo.png</logo>
  <id>urn:uuid:60a76c80-d399-11d9-b93C-0003939e0af6</id>
  <entry>
    <title>Atom-Powered Robots Run Amok</title>
    <link href="https://example.org/2003/12/13/atom03"/>
    <link rel="enclosure" type="audio/mpeg" length="1337" href="https://example.org/audio.mp3"/>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a</id>
    <published>2003-12-13T08:29:29-04:00</published>
    <updated>2003-12-13T18:30:02Z</updated>
    <summary>Some text.</summary>
    <author><name>Jane Roe</name><email>jane@example.org</email></author>
    <category term="robots" scheme="https://example.org/categories"/>
    <itunes:image href="https://example.org/episode.jpg"/>
  </entry>
</feed>
"""

OPML_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<opml version="2.0">
  <head><title>Subscriptions</title></head>
  <body>
    <outline text="Top" type="rss" xmlUrl="https://a.example.com/feed.xml"/>
    <outline text="Folder">
      <outline text="Second" type="rss" xmlUrl="https://b.example.com/rss"/>
      <outline text="Nested folder">
        <outline text="Third" type="rss" xmlUrl="https://c.example.com/atom.xml" htmlUrl="https://c.example.com/"/>
      </outline>
      <outline text="Fourth" type="rss" xmlUrl="https://d.example.com/feed"/>
    </outline>
    <outline text="Top duplicate" type="rss" xmlUrl="https://a.example.com/feed.xml"/>
  </body>
</opml>
"""


@pytest.fixture
def sample_feed() -> str:
    return SAMPLE_FEED


@pytest.fixture
def namespaced_feed() -> str:
    return NAMESPACED_FEED


@pytest.fixture
def atom_feed() -> str:
    return ATOM_FEED


@pytest.fixture
def opml_document() -> str:
    return OPML_DOCUMENT
