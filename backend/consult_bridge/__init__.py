"""Call-analysis webhook bridge: turns voice-agent call events into consultation records."""

__version__ = "1.0.0"
