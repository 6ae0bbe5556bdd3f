"""Chain-specific node clients."""
