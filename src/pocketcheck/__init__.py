"""pocketcheck package."""
