"""Adapters for live servers."""

from .stats import RedisStatsSource, StatsSourceError, render_commandstats

__all__ = ["RedisStatsSource", "StatsSourceError", "render_commandstats"]
