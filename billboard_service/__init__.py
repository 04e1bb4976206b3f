"""Billboard flag service and client."""
