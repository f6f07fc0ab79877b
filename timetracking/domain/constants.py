#!/usr/bin/env python3
"""
Application Constants

Centralized configuration constants for time tracking aggregation and API calls.
Provides type-safe, immutable configuration values used across collectors.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeTrackingConfig:
    """
    Time tracking and governance constants.

    Attributes:
        FEATURE_WORK_ITEM_TYPE: Work item type at which CapEx/OpEx classification is authoritative
        EXPENSE_FIELD: Custom field holding the Feature's expense classification
        MAX_HIERARCHY_DEPTH: Maximum parent-chain steps when resolving a Feature
        HOURS_PER_DAY: Expected logged hours per business day per member
        COMPLIANCE_THRESHOLD_PCT: Compliance percentage at or above which a team is compliant
        NO_FEATURE_TITLE: Title used when no Feature owns the logged work

    Example:
        >>> config = time_tracking
        >>> print(config.HOURS_PER_DAY)
        8
    """

    FEATURE_WORK_ITEM_TYPE: str = "Feature"
    """Work item type at which CapEx/OpEx classification is authoritative"""

    EXPENSE_FIELD: str = "Custom.FeatureExpense"
    """Custom field holding the Feature's expense classification"""

    MAX_HIERARCHY_DEPTH: int = 5
    """Maximum parent-chain steps when resolving a Feature"""

    HOURS_PER_DAY: int = 8
    """Expected logged hours per business day per member"""

    COMPLIANCE_THRESHOLD_PCT: float = 95.0
    """Compliance percentage at or above which a team is compliant"""

    NO_FEATURE_TITLE: str = "No Feature"
    """Title used when no Feature owns the logged work"""

    NO_FEATURE_KEY: str = "none"
    """Feature breakdown key for hours without a Feature"""


@dataclass(frozen=True)
class APIConfig:
    """
    API call configuration constants.

    Attributes:
        WORK_ITEM_BATCH_SIZE: Work item ids per Azure DevOps request (API limit: 200)
        WORK_ITEM_BATCH_CONCURRENCY: Concurrent work item batch requests
        WORKLOG_FETCH_CONCURRENCY: Concurrent per-member 7pace worklog requests
        WORKLOG_MAX_PAGES: Safety cap on OData pages followed per member
        TEAMS_PAGE_SIZE: Page size when listing project teams
        DEFAULT_TIMEOUT_SECONDS: Default HTTP timeout for API calls
        ADO_API_VERSION: Azure DevOps REST API version
        SEVEN_PACE_API_VERSION: 7pace REST/OData API version
    """

    WORK_ITEM_BATCH_SIZE: int = 200
    """Work item ids per Azure DevOps request (API limit: 200)"""

    WORK_ITEM_BATCH_CONCURRENCY: int = 3
    """Concurrent work item batch requests"""

    WORKLOG_FETCH_CONCURRENCY: int = 5
    """Concurrent per-member 7pace worklog requests"""

    WORKLOG_MAX_PAGES: int = 10
    """Safety cap on OData pages followed per member"""

    TEAMS_PAGE_SIZE: int = 500
    """Page size when listing project teams"""

    DEFAULT_TIMEOUT_SECONDS: int = 30
    """Default HTTP timeout for API calls"""

    ADO_API_VERSION: str = "7.1"
    """Azure DevOps REST API version"""

    SEVEN_PACE_API_VERSION: str = "3.2"
    """7pace REST/OData API version"""


@dataclass(frozen=True)
class DiagnosticsConfig:
    """
    Sample sizes for the pipeline diagnostics payload.
    """

    USER_SAMPLE_SIZE: int = 20
    NOT_ON_TEAM_SAMPLE_SIZE: int = 10
    WORKLOG_SAMPLE_SIZE: int = 5
    REQUEST_URL_SAMPLE_SIZE: int = 5


time_tracking = TimeTrackingConfig()
api_config = APIConfig()
diagnostics_config = DiagnosticsConfig()
