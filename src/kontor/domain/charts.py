"""Standard chart of accounts templates."""

from dataclasses import dataclass
from typing import Optional

from kontor.domain.entities import AccountClass, AccountType


@dataclass(frozen=True)
class StandardAccount:
    account_number: str
    account_name: str
    account_type: AccountType
    account_class: AccountClass
    tax_code: Optional[str] = None
    description: Optional[str] = None


A, L, E, R, X = (
    AccountType.ASSET,
    AccountType.LIABILITY,
    AccountType.EQUITY,
    AccountType.REVENUE,
    AccountType.EXPENSE,
)

SKR03_ACCOUNTS: tuple[StandardAccount, ...] = (
    StandardAccount("0027", "EDV-Software", A, AccountClass.FIXED_ASSET),
    StandardAccount("0420", "Technische Anlagen und Maschinen", A, AccountClass.FIXED_ASSET),
    StandardAccount("0480", "Geringwertige Wirtschaftsgüter", A, AccountClass.FIXED_ASSET),
    StandardAccount(
        "0650",
        "Verbindlichkeiten gegenüber Kreditinstituten",
        L,
        AccountClass.LONG_TERM_LIABILITY,
        description="Laufzeit größer 5 Jahre",
    ),
    StandardAccount("0800", "Gezeichnetes Kapital", E, AccountClass.EQUITY),
    StandardAccount("1000", "Kasse", A, AccountClass.CURRENT_ASSET),
    StandardAccount("1200", "Bank", A, AccountClass.CURRENT_ASSET),
    StandardAccount("1400", "Forderungen aus Lieferungen und Leistungen", A, AccountClass.CURRENT_ASSET),
    StandardAccount("1571", "Abziehbare Vorsteuer 7 %", A, AccountClass.CURRENT_ASSET, tax_code="VSt7"),
    StandardAccount("1576", "Abziehbare Vorsteuer 19 %", A, AccountClass.CURRENT_ASSET, tax_code="VSt19"),
    StandardAccount(
        "1600", "Verbindlichkeiten aus Lieferungen und Leistungen", L, AccountClass.CURRENT_LIABILITY
    ),
    StandardAccount("1771", "Umsatzsteuer 7 %", L, AccountClass.CURRENT_LIABILITY, tax_code="USt7"),
    StandardAccount("1776", "Umsatzsteuer 19 %", L, AccountClass.CURRENT_LIABILITY, tax_code="USt19"),
    StandardAccount("1780", "Umsatzsteuer-Vorauszahlungen", L, AccountClass.CURRENT_LIABILITY),
    StandardAccount("1800", "Privatentnahmen allgemein", E, AccountClass.EQUITY),
    StandardAccount("2700", "Sonstige Erträge", R, AccountClass.OTHER_REVENUE),
    StandardAccount(
        "3400", "Wareneingang 19 % Vorsteuer", X, AccountClass.OPERATING_EXPENSE, tax_code="VSt19"
    ),
    StandardAccount("4100", "Löhne und Gehälter", X, AccountClass.OPERATING_EXPENSE),
    StandardAccount("4210", "Miete", X, AccountClass.OPERATING_EXPENSE),
    StandardAccount("4600", "Werbekosten", X, AccountClass.OPERATING_EXPENSE),
    StandardAccount("4930", "Bürobedarf", X, AccountClass.OPERATING_EXPENSE),
    StandardAccount("4970", "Nebenkosten des Geldverkehrs", X, AccountClass.OTHER_EXPENSE),
    StandardAccount("8300", "Erlöse 7 % USt", R, AccountClass.OPERATING_REVENUE, tax_code="USt7"),
    StandardAccount("8400", "Erlöse 19 % USt", R, AccountClass.OPERATING_REVENUE, tax_code="USt19"),
)

CHART_TEMPLATES: dict[str, tuple[StandardAccount, ...]] = {
    "SKR03": SKR03_ACCOUNTS,
}
