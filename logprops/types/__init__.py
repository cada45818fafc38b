"""Props and todo types."""
