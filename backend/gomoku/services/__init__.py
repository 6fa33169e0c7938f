"""Game domain services: room registry and leaderboard.

This package contains the room state machine and aggregate counters. It
is imported by the Socket.IO handlers and HTTP routes, keeping transport
concerns separated from core game mechanics.
"""
