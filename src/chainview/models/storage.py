"""Stored data objects backing uploaded assets."""

from __future__ import annotations

from sqlalchemy import BigInteger, Enum, Integer, Text
from sqlalchemy.orm import Mapped, composite, mapped_column

from chainview.db.session import Base
from chainview.models.variants import DataObjectOwner, DataObjectOwnerKind, LiaisonJudgement


class DataObject(Base):
    """Content-addressed object held by the storage system."""

    __tablename__ = "data_object"

    # Runtime content id (hex), unique per upload.
    content_id: Mapped[str] = mapped_column(Text, primary_key=True)
    ipfs_content_id: Mapped[str] = mapped_column(Text, nullable=False)
    type_id: Mapped[int] = mapped_column(Integer, nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_in_block: Mapped[int] = mapped_column(BigInteger, nullable=False)

    owner_kind: Mapped[DataObjectOwnerKind] = mapped_column(
        "owner",
        Enum(DataObjectOwnerKind, name="data_object_owner_kind", native_enum=False, length=16),
        nullable=False,
    )
    owner_id: Mapped[str] = mapped_column(Text, nullable=False)
    owner: Mapped[DataObjectOwner] = composite("owner_kind", "owner_id")

    liaison_judgement: Mapped[LiaisonJudgement] = mapped_column(
        Enum(LiaisonJudgement, name="liaison_judgement", native_enum=False, length=16),
        nullable=False,
        default=LiaisonJudgement.PENDING,
    )
