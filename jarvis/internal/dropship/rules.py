# jarvis/internal/dropship/rules.py
from dataclasses import dataclass

from jarvis.config import Config
from jarvis.models.pydantic.dropship import QualificationResult, ResolvedLineItem


@dataclass(frozen=True)
class SupplierProfile:
    name: str
    account_number: str = ''
    greeting: str = ''

    @property
    def salutation(self) -> str:
        return self.greeting or f'Dear Team {self.name},'


@dataclass(frozen=True)
class RuleSet:
    """
    Versioned qualification rules. An order qualifies when every line item ships to
    `country`, is assigned to `warehouse` and resolves to the same allowed supplier.
    """

    version: str
    country: str
    warehouse: str
    suppliers: tuple[SupplierProfile, ...]
    single_item: bool = False
    risk_gate: bool = False
    address_gate: bool = False
    risk_threshold: float = 0.5

    @property
    def supplier_names(self) -> set[str]:
        return {supplier.name for supplier in self.suppliers}

    def supplier(self, name: str) -> SupplierProfile | None:
        for supplier in self.suppliers:
            if supplier.name == name:
                return supplier
        return None

    def precheck(self, country: str, item_count: int) -> str:
        """Order level checks that need no lookups. Returns the failure reason, '' when it passes."""
        if item_count == 0:
            return 'order has no line items'
        if self.single_item and item_count > 1:
            return f'{item_count} line items, rule set {self.version} handles single item orders'
        if country != self.country:
            return f'ships to {country or "no country"}, not {self.country}'
        return ''

    def item_qualifies(self, country: str, item: ResolvedLineItem) -> str:
        """Returns the reason the item fails, '' when it passes."""
        if country != self.country:
            return f'ships to {country or "no country"}, not {self.country}'
        if item.supplier not in self.supplier_names:
            return f'supplier {item.supplier} not allowed'
        if item.warehouse != self.warehouse:
            return f'warehouse {item.warehouse} is not {self.warehouse}'
        return ''

    def conclude(self, items: list[ResolvedLineItem]) -> QualificationResult:
        """Supplier uniqueness, once every item passed on its own."""
        suppliers = {item.supplier for item in items}
        if len(suppliers) != 1:
            return QualificationResult(
                qualifies=False, reason=f'mixed suppliers: {", ".join(sorted(suppliers))}', items=items
            )
        return QualificationResult(qualifies=True, supplier=suppliers.pop(), items=items)

    def evaluate(self, country: str, items: list[ResolvedLineItem]) -> QualificationResult:
        """Evaluates items that were already resolved."""
        reason = self.precheck(country, len(items))
        if reason:
            return QualificationResult(qualifies=False, reason=reason, items=items)

        for item in items:
            reason = self.item_qualifies(country, item)
            if reason:
                return QualificationResult(qualifies=False, reason=f'{item.line_item.sku}: {reason}', items=items)

        return self.conclude(items)


BEST_BUY = SupplierProfile(name='Best Buy', account_number='62317')
MEDLINE = SupplierProfile(name='Medline Canada')
DROPSHIP_WAREHOUSE = 'A - Dropship (Abbey Lane)'

RULESETS: dict[str, RuleSet] = {
    # Best Buy, orders with exactly one line item
    '2024-05': RuleSet(
        version='2024-05',
        country='Canada',
        warehouse=DROPSHIP_WAREHOUSE,
        suppliers=(BEST_BUY,),
        single_item=True,
    ),
    # Medline Canada, multi item orders, risk and address review
    '2024-07': RuleSet(
        version='2024-07',
        country='Canada',
        warehouse=DROPSHIP_WAREHOUSE,
        suppliers=(BEST_BUY, MEDLINE),
        risk_gate=True,
        address_gate=True,
    ),
}
LATEST_RULESET = '2024-07'


def get_ruleset(version: str = Config.ruleset_version) -> RuleSet:
    if not version:
        return RULESETS[LATEST_RULESET]
    try:
        return RULESETS[version]
    except KeyError:
        raise ValueError(f'Unknown rule set {version}, expected one of {", ".join(RULESETS)}')
