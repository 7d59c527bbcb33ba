"""
Stored ABAC policy records.

Each row holds one raw policy record exactly as an administrator saved
it. Records are not validated on write; the policy normalizer decides
what is usable at evaluation time.
"""

from typing import Any
from sqlalchemy import JSON, Integer, String, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class AbacPolicyRecord(Base, TimestampMixin):
    """
    One raw policy record belonging to an organization.

    position keeps the administrator's ordering, which breaks ties
    between policies of equal priority.
    """

    __tablename__ = "abac_policies"
    __table_args__ = (
        Index("ix_abac_policies_org_position", "org_id", "position"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    org_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Raw record: {"id", "description", "effect", "actions", "resources", ...}
    payload: Mapped[Any] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AbacPolicyRecord org={self.org_id} position={self.position}>"
