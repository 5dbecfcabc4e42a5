"""Steam library to Notion database synchronization."""
