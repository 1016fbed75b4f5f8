"""
Games module - Live game implementations.

Each game has its own subpackage with:
- Board and unit models the state builder can snapshot
- Card definitions for the target selectors
- A move executor for the boss auto-move phase
"""
