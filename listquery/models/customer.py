from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from listquery.db.session import Base
from listquery.models.common import IntIdMixin, TimestampMixin


class Customer(Base, IntIdMixin, TimestampMixin):
    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="Active")
    employees: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    credit_limit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    is_partner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    signed_on: Mapped[date | None] = mapped_column(Date, nullable=True)
