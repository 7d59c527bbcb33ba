"""
Tenant clearance - data residency zones and classification levels.
"""

from dataclasses import dataclass
from enum import Enum


class DataResidencyZone(str, Enum):
    UK_ONLY = "UK_ONLY"
    UK_AND_EEA = "UK_AND_EEA"
    GLOBAL_RESTRICTED = "GLOBAL_RESTRICTED"


class DataClassificationLevel(str, Enum):
    OFFICIAL = "OFFICIAL"
    OFFICIAL_SENSITIVE = "OFFICIAL_SENSITIVE"
    SECRET = "SECRET"
    TOP_SECRET = "TOP_SECRET"

    @property
    def rank(self) -> int:
        return CLASSIFICATION_RANK[self]


CLASSIFICATION_RANK: dict[DataClassificationLevel, int] = {
    DataClassificationLevel.OFFICIAL: 1,
    DataClassificationLevel.OFFICIAL_SENSITIVE: 2,
    DataClassificationLevel.SECRET: 3,
    DataClassificationLevel.TOP_SECRET: 4,
}


@dataclass(frozen=True)
class TenantScope:
    """The organization's data handling envelope."""
    org_id: str
    data_residency: DataResidencyZone
    data_classification: DataClassificationLevel
    audit_source: str | None = None
    audit_batch_id: str | None = None


def check_clearance(
    tenant: TenantScope,
    expected_residency: DataResidencyZone | None = None,
    expected_classification: DataClassificationLevel | None = None,
) -> str | None:
    """
    Check a tenant against the residency/classification a call requires.

    Returns:
        None when cleared, otherwise the denial reason
    """
    if (
        expected_classification is not None
        and DataClassificationLevel(tenant.data_classification).rank
        < DataClassificationLevel(expected_classification).rank
    ):
        return "Tenant clearance is insufficient for this classification"

    if (
        expected_residency is not None
        and DataResidencyZone(expected_residency) != DataResidencyZone(tenant.data_residency)
    ):
        return "Requested residency zone mismatch"

    return None
