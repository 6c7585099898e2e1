"""Game domain services: the session coordinator and its parts.

This package holds the in-memory state machine (players, matchmaking,
sessions, tournaments, leaderboard) and never imports Flask or Socket.IO;
socket handlers and HTTP routes reach it through ``coordinator.Coordinator``.
"""
