"""Statistics and reports over time entries."""

from legal_time.analysis.stats import Stats, UserSummary, Window, aggregate, summarize_users

__all__ = ["Stats", "UserSummary", "Window", "aggregate", "summarize_users"]
