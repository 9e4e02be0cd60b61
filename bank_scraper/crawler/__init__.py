"""Crawl pipeline: frontier, fetcher, orchestrator and shared models."""
