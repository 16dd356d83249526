"""Rules engine for the Whoopie trick-taking card game."""

__all__ = [
    "errors",
    "cards",
    "deck",
    "bidding",
    "trump",
    "trick",
    "mechanics",
    "scoring",
    "settings",
    "state",
    "events",
    "game",
    "view",
    "encode",
    "service",
]
