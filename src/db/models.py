from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class StateRootOrm(Base):
    __tablename__ = "state_roots"

    root: Mapped[str] = mapped_column(String, primary_key=True)
    block_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_head: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class StateAccountOrm(Base):
    __tablename__ = "state_accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    root: Mapped[str] = mapped_column(String, ForeignKey("state_roots.root"), nullable=False)
    # Null when the dump had no preimage for the hashed key.
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    # Stored verbatim as decimal text; wei balances exceed any SQL integer type.
    balance: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("root", "address", name="uq_state_accounts_root_address"),
        Index("ix_state_accounts_root", "root"),
    )
