"""Members and working-group workers referenced by forum events."""

from sqlalchemy import Boolean, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chainview.db.session import Base


class Membership(Base):
    """A chain member.

    Members are created by the membership module, which this projector does not
    consume; forum events only ever upsert a bare-id row.
    """

    __tablename__ = "membership"

    id: Mapped[str] = mapped_column(Text, primary_key=True)


class WorkingGroup(Base):
    """A runtime working group (for example the forum moderators)."""

    __tablename__ = "working_group"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)


class Worker(Base):
    """A worker of a working group; the lead has ``is_lead`` set."""

    __tablename__ = "worker"
    __table_args__ = (UniqueConstraint("group_id", "runtime_id"),)

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    group_id: Mapped[str] = mapped_column(Text, ForeignKey("working_group.id"), nullable=False)
    # Worker id as assigned by the runtime, unique within its group.
    runtime_id: Mapped[int] = mapped_column(Integer, nullable=False)
    is_lead: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    membership_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("membership.id"),
        nullable=True,
    )

    group: Mapped[WorkingGroup] = relationship()
