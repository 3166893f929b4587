"""Slack RTM bot that learns a Markov chain from the channel and talks back."""

__version__ = "0.1.0"
