"""prcopy core: extraction, templating and aggregation of PR review text."""
