"""YouTube Data API access: reads, playlist writes, duration parsing."""
