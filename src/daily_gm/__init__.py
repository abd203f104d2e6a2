"""daily-gm: daily on-chain GM greetings with resumable received-count sync."""

__version__ = "0.1.0"
