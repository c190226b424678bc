"""Block bookkeeping models."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from chainview.db.session import Base


class Block(Base):
    """A processed chain block."""

    __tablename__ = "block"

    number: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    executed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    network: Mapped[str] = mapped_column(Text, nullable=False)


class ProcessorState(Base):
    """Single-row cursor recording the last block committed by the projector."""

    __tablename__ = "processor_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    last_processed_block: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
