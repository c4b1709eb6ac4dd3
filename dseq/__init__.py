"""Transaction sequencer with persistent state, an in-memory data stream and a load generator."""

__version__ = "0.1.0"