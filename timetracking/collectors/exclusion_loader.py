"""
Member Exclusion Loader

Loads member role assignments from the settings file. Excluded members are
tagged in the report, not removed from it.

Settings layout:
    {
        "memberRoles": {
            "exclusions": [
                {"uniqueName": "lead@contoso.com", "role": "Engineering Manager", "excludeFromMetrics": true}
            ]
        }
    }
"""

import json
import pathlib

from ..core import get_logger
from ..domain.team import MemberExclusion
from ..secure_config import get_config
from ..utils.error_handling import log_and_return_default

logger = get_logger(__name__)


class MemberExclusionLoader:
    """Load member exclusions from the settings file."""

    def __init__(self, settings_file: "pathlib.Path | None" = None):
        """
        Initialize loader.

        Args:
            settings_file: Path to settings JSON (default: TIMETRACKING_SETTINGS_FILE or data/settings.json)
        """
        self.settings_file = settings_file or get_config().get_settings_file()

    def load_exclusions(self) -> list[MemberExclusion]:
        """
        Load exclusion records.

        A missing file means no exclusions. A corrupted file is logged and
        treated the same way. Records without a uniqueName are skipped.

        Returns:
            List of MemberExclusion
        """
        if not self.settings_file.exists():
            logger.debug("Settings file not found, no member exclusions", extra={"file_path": str(self.settings_file)})
            return []

        try:
            with open(self.settings_file, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return log_and_return_default(  # type: ignore[no-any-return]
                logger,
                e,
                context={"file_path": str(self.settings_file)},
                default_value=[],
                error_type="Settings loading",
            )

        member_roles = data.get("memberRoles") if isinstance(data, dict) else None
        records = (member_roles or {}).get("exclusions") or []

        exclusions = []
        for record in records:
            if not isinstance(record, dict) or not str(record.get("uniqueName") or "").strip():
                logger.warning(f"Skipping malformed exclusion record: {record!r}")
                continue
            exclusions.append(
                MemberExclusion(
                    unique_name=record["uniqueName"],
                    role=record.get("role") or None,
                    exclude_from_metrics=bool(record.get("excludeFromMetrics", False)),
                )
            )

        logger.info(
            "Loaded member exclusions",
            extra={"file_path": str(self.settings_file), "count": len(exclusions)},
        )
        return exclusions
