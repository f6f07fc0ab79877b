"""
Data Collectors - Fetch time tracking data from external systems

This package contains:
    - Azure DevOps REST client (team rosters, work item hierarchy)
    - 7pace client (user directory, per-user worklogs)
    - The aggregation pipeline producing the team time report

Run a collection with:
    python -m timetracking.collectors.team_time_summary --team "Platform Team"
"""

__all__ = []
