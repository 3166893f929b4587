"""Core module for the text model and session management."""

from .bot import Bot, mentions
from .markov import BEGIN, END, TextModel
from .session import Session, Ticker

__all__ = [
    "BEGIN",
    "END",
    "Bot",
    "Session",
    "TextModel",
    "Ticker",
    "mentions",
]
