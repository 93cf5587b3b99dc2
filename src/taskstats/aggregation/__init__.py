"""Aggregation module for task durations.

- Orchestrates task creation and average-duration look-ups
- Runs blocking store calls on a worker pool
- Forbidden: SQL, HTTP concerns
"""
