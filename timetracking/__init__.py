"""
Time Tracking Governance - CapEx/OpEx time aggregation for engineering teams

Pulls 7pace worklogs for every member of an Azure DevOps team, attributes
each logged hour to the Feature that owns the work item, and derives
per-member breakdowns, wrong-level logging reports and compliance metrics.
"""

__version__ = "0.1.0"
