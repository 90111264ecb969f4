"""Data layer -- repository queries, boundary file source, and the loader bundle used by pages."""
