"""
Mythos - Naruto Mythos TCG rules engine and AI opponents.

A deterministic, rules-driven engine for two-player games with AI opponents.
Provides:
- State management and legal action generation
- Card effect resolution with pausable target selection
- Easy, Medium, Hard and Expert AI strategies
- In-memory sessions and a REST API
"""

__version__ = "0.1.0"
