"""Bot strategies for Whoopie."""

from .base import BotStrategy
from .random_bot import RandomBot

__all__ = ["BotStrategy", "RandomBot"]
