"""Feature modules: one router and its schemas per feature."""
