"""SQLAlchemy models for kontor database."""

from sqlalchemy import (
    Column,
    Integer,
    BigInteger,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    CheckConstraint,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from kontor.domain.entities import utcnow

Base = declarative_base()


class ChartAccount(Base):
    """Chart of accounts model."""

    __tablename__ = "chart_of_accounts"

    id = Column(Integer, primary_key=True)
    account_number = Column(String, unique=True, nullable=False)
    account_name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    account_class = Column(String, nullable=False)
    tax_relevant = Column(Boolean, default=False, nullable=False)
    tax_code = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_system_account = Column(Boolean, default=False, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    lines = relationship("JournalLine", back_populates="account")


class JournalEntryRecord(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    entry_number = Column(String, unique=True, nullable=False)
    entry_date = Column(Date, nullable=False)
    posting_date = Column(Date, nullable=False)
    fiscal_year = Column(Integer, nullable=False)
    fiscal_period = Column(Integer, nullable=False)
    entry_type = Column(String, nullable=False)
    status = Column(String, nullable=False, default="draft")
    description = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    total_debit_cents = Column(BigInteger, nullable=False)
    total_credit_cents = Column(BigInteger, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    reversed_by = Column(Integer, ForeignKey("journal_entries.id"), nullable=True)
    reverses = Column(Integer, ForeignKey("journal_entries.id"), nullable=True)
    posted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("total_debit_cents = total_credit_cents", name="ck_entry_balanced"),
    )

    # Relationships
    lines = relationship(
        "JournalLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.line_number",
    )


class JournalLine(Base):
    """Journal entry line model. Amounts are stored as integer cents."""

    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    line_number = Column(Integer, nullable=False)
    account_id = Column(Integer, ForeignKey("chart_of_accounts.id"), nullable=False)
    debit_cents = Column(BigInteger, nullable=False, default=0)
    credit_cents = Column(BigInteger, nullable=False, default=0)
    description = Column(String, nullable=True)
    tax_code = Column(String, nullable=True)
    tax_amount_cents = Column(BigInteger, nullable=True)

    __table_args__ = (
        UniqueConstraint("journal_entry_id", "line_number", name="uq_entry_line_number"),
        CheckConstraint(
            "(debit_cents > 0 AND credit_cents = 0) OR (debit_cents = 0 AND credit_cents > 0)",
            name="ck_line_one_side",
        ),
    )

    # Relationships
    entry = relationship("JournalEntryRecord", back_populates="lines")
    account = relationship("ChartAccount", back_populates="lines")


class NumberSequence(Base):
    """Named counters for gap-free document numbers."""

    __tablename__ = "sequences"

    name = Column(String, primary_key=True)
    next_value = Column(BigInteger, nullable=False, default=1)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
