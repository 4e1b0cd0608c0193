"""
Tests for the AI app.

This package contains tests for:
- Random and heuristic players
- Position evaluation
- The in-memory match runner
- The bot pool polling the game store
- The run_bots and play_match commands
"""
