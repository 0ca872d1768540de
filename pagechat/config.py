EMBEDDING = {
    "model": "text-embedding-3-small",
    "dimensions": 1536,
    "timeout_seconds": 30.0,
    # Number of chunks embedded in parallel while ingesting one page
    "workers": 1,
}

CHUNKING = {
    "size": 1000,
    "strategy": "sentence",   # "sentence" | "fixed"
}

RETRIEVAL = {
    "top_k": 20,
}

VECTOR_DB = {
    "collection": "web_scraped_data",
    "distance": "COSINE",
    "dimensions": 1536,
    "max_text_length": 65535,
    "list_limit": 1000,
}

LLM = {
    "model": "gpt-4o-mini",
    "max_tokens": 1024,
    "temperature": 0.2,
    "timeout_seconds": 60.0,
}

SCRAPER = {
    "timeout_seconds": 10.0,
    "user_agent": "Mozilla/5.0 (compatible; WebPageChatbot/1.0)",
    # Internal path prefixes left out of a page's internal links, e.g. ["/blog"]
    "exclude_internal_prefixes": [],
}
