"""Infrastructure: logging, metrics, flag providers and the realtime relay."""
