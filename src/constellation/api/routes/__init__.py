"""HTTP routes: pages, redirects, the auth bridge and the JSON API."""
