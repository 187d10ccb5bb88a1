"""Command-line tooling: the flow validator CLI and the hardcoded-secret scan."""
