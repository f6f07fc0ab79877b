"""
Member identity

Azure DevOps roster entries and 7pace worklogs refer to people by their
unique name (usually an email address) with inconsistent casing.
NormalizedIdentity is the only key used to match the two.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class NormalizedIdentity:
    """
    Case-insensitive member identity.

    Attributes:
        value: Lower-cased, whitespace-stripped unique name

    Example:
        >>> NormalizedIdentity.of("Jane.Doe@Contoso.com") == NormalizedIdentity.of("jane.doe@contoso.com ")
        True
    """

    value: str

    def __post_init__(self) -> None:
        if self.value != self.value.strip().lower():
            raise ValueError(f"Identity must be normalized, got {self.value!r}; use NormalizedIdentity.of()")

    @classmethod
    def of(cls, raw: str) -> "NormalizedIdentity":
        """Normalize a raw unique name."""
        return cls(raw.strip().lower())

    @classmethod
    def of_optional(cls, raw: str | None) -> "NormalizedIdentity | None":
        """Normalize a raw unique name, returning None when it is missing or blank."""
        if not raw or not raw.strip():
            return None
        return cls.of(raw)

    def __str__(self) -> str:
        return self.value
