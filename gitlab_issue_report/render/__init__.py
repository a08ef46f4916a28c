"""Report renderers and their context types."""
