"""Google Scholar author profiles via SerpAPI."""
