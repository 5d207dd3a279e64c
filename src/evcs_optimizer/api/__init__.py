"""Host boundary — background jobs and the HTTP API."""
