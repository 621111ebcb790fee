"""Built-in feed registry."""

from typing import List

from .models import SourceConfig

DEFAULT_SOURCES: List[SourceConfig] = [
    SourceConfig(name="Al Jazeera", url="https://www.aljazeera.com/xml/rss/all.xml", category="international"),
    SourceConfig(name="BBC News", url="http://feeds.bbci.co.uk/news/rss.xml", category="international"),
    SourceConfig(name="BBC World", url="http://feeds.bbci.co.uk/news/world/rss.xml", category="world"),
    SourceConfig(name="BBC Business", url="http://feeds.bbci.co.uk/news/business/rss.xml", category="business"),
    SourceConfig(name="BBC Technology", url="http://feeds.bbci.co.uk/news/technology/rss.xml", category="technology"),
    SourceConfig(name="Dawn News", url="https://www.dawn.com/feeds/", category="pakistan"),
    SourceConfig(name="Reuters World", url="https://feeds.reuters.com/reuters/worldNews", category="world"),
    SourceConfig(name="Reuters Business", url="https://feeds.reuters.com/reuters/businessNews", category="business"),
    SourceConfig(name="CNN Top Stories", url="http://rss.cnn.com/rss/edition.rss", category="international"),
    SourceConfig(name="The Guardian", url="https://www.theguardian.com/world/rss", category="international"),
    SourceConfig(name="AP News", url="https://feeds.apnews.com/rss/apf-topnews", category="international"),
]
