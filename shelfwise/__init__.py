"""Shelfwise: personal book shelves and reviews backed by the Google Books catalog."""
