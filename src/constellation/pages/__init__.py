"""Page layer -- per-route handlers, redirect routes, and their result types."""
