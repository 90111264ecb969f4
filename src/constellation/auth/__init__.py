"""Sign-in for the web app: Google OAuth, allowlist, and the request guard."""
