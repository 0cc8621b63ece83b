"""
Source configuration for the candidate collectors.

RSS feeds are (source name -> feed URL / category) entries; the search API
is configured through settings (key, endpoint) plus the constants below.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

# Network
RSS_TIMEOUT_SECONDS = 30
API_TIMEOUT_SECONDS = 60
RSS_ITEMS_PER_FEED = 50
USER_AGENT = "HeadlineCurator/1.0"

# Search API retry policy: attempts, then 1s, 2s, 4s ... between them
SEARCH_MAX_ATTEMPTS = 3
SEARCH_BACKOFF_BASE_SECONDS = 1.0

# Search API query parameters
NEWSDATA_LANGUAGE = "en"
NEWSDATA_CATEGORIES = "technology,science"
NEWSDATA_DEFAULT_SOURCE = "NewsData.io"


@dataclass(frozen=True)
class FeedSource:
    source_name: str
    url: str
    category: Optional[str] = None


RSS_FEEDS: Tuple[FeedSource, ...] = (
    # AI & ML Companies
    FeedSource("OpenAI Blog", "https://openai.com/blog/rss/", "AI Companies"),
    FeedSource("Hugging Face Blog", "https://huggingface.co/blog/feed.xml", "AI Companies"),
    FeedSource("LangChain Blog", "https://blog.langchain.dev/rss/", "AI Companies"),
    FeedSource("GitHub Blog", "https://github.blog/feed/", "AI Companies"),

    # Cloud & Infrastructure
    FeedSource("AWS Blog", "https://aws.amazon.com/blogs/aws/feed/", "Cloud"),
    FeedSource("AWS Developer Blog", "https://aws.amazon.com/blogs/developer/feed/", "Cloud"),
    FeedSource("Microsoft Developer Blog", "https://devblogs.microsoft.com/feed/", "Cloud"),
    FeedSource("Supabase Blog", "https://supabase.com/blog/feed.xml", "Cloud"),
    FeedSource("Vercel Blog", "https://vercel.com/blog/feed.xml", "Cloud"),

    # Tech News & Analysis
    FeedSource("TechCrunch", "https://techcrunch.com/feed/", "Tech News"),
    FeedSource("The Verge", "https://www.theverge.com/rss/index.xml", "Tech News"),
    FeedSource("VentureBeat", "https://venturebeat.com/feed/", "Tech News"),
    FeedSource("Wired", "https://www.wired.com/feed/rss", "Tech News"),
    FeedSource("MIT Technology Review", "https://www.technologyreview.com/feed/", "Tech News"),

    # AI Research & Education
    FeedSource("BAIR Blog", "https://bair.berkeley.edu/blog/feed.xml", "AI Research"),
    FeedSource("KDnuggets", "https://www.kdnuggets.com/feed", "AI Research"),
    FeedSource("Towards Data Science", "https://towardsdatascience.com/feed", "AI Research"),
    FeedSource("MarkTechPost", "https://www.marktechpost.com/feed/", "AI Research"),
    FeedSource("Louis Bouchard AI", "https://www.louisbouchard.ai/feed/", "AI Research"),
    FeedSource("Machine Learning Mastery", "https://machinelearningmastery.com/blog/feed/", "AI Research"),

    # Startup & Community
    FeedSource("Y Combinator Blog", "https://blog.ycombinator.com/feed/", "Startups"),
    FeedSource("Sam Altman Blog", "https://blog.samaltman.com/feed", "Startups"),

    # AI Thought Leadership
    FeedSource("Gary Marcus Substack", "https://garymarcus.substack.com/feed", "AI Thought Leadership"),
    FeedSource("Import AI Substack", "https://importai.substack.com/feed", "AI Thought Leadership"),
    FeedSource("Greg Isenberg Letter", "https://latecheckout.substack.com/feed", "AI Thought Leadership"),
)
