"""Site editor: tiered, concurrency-safe AI edits to hosted business sites."""
