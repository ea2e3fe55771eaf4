"""
AI Digest - Daily AI news digest delivered to Telegram.

Polls a fixed set of RSS/Atom feeds, keeps the major items from the last
day, and pushes a single formatted digest (optionally with a spot gold
price) to a Telegram chat.
"""

__version__ = "1.0.0"
