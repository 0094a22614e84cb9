"""HTTP and WebSocket surface for renderers and input handlers."""
