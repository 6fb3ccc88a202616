"""numberdesk - batch administration for a pool of telephony numbers."""

__version__ = "0.1.0"
