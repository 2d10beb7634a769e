"""Chain Reaction game engine, strategies and configuration."""
