"""codepulse: editor activity tracking relayed to a local daemon."""

__version__ = "0.1.0"
