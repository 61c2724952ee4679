"""SQLite implementation of commercial rule storage."""

from datetime import datetime
from decimal import Decimal

import aiosqlite

from orderflow.config import get_logger
from orderflow.core.entities.pricing import (
    CalculationType,
    PricingRule,
    RuleTarget,
    RuleType,
)
from orderflow.core.interfaces.pricing_rule_store import IPricingRuleStore
from orderflow.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLitePricingRuleStore(IPricingRuleStore):

    async def create_rule(self, rule: PricingRule) -> PricingRule:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO pricing_rules (
                    id, name, rule_type, calculation_type, value,
                    min_order_value, priority, target, effective_from, effective_to
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    rule.id,
                    rule.name,
                    rule.rule_type.value,
                    rule.calculation_type.value,
                    str(rule.value),
                    str(rule.min_order_value),
                    rule.priority,
                    rule.target.value,
                    rule.effective_from.isoformat(),
                    rule.effective_to.isoformat() if rule.effective_to else None,
                ),
            )
            logger.info("pricing_rule_created", rule_id=rule.id, rule_type=rule.rule_type.value)
            return rule

    async def list_rules(self) -> list[PricingRule]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM pricing_rules ORDER BY priority DESC, name"
            )
            rows = await cursor.fetchall()
            return [self._row_to_rule(row) for row in rows]

    async def delete_rule(self, rule_id: str) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM pricing_rules WHERE id = ?", (rule_id,))
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("pricing_rule_deleted", rule_id=rule_id)
            return deleted

    @staticmethod
    def _row_to_rule(row: aiosqlite.Row) -> PricingRule:
        return PricingRule(
            id=row["id"],
            name=row["name"],
            rule_type=RuleType(row["rule_type"]),
            calculation_type=CalculationType(row["calculation_type"]),
            value=Decimal(row["value"]),
            min_order_value=Decimal(row["min_order_value"]),
            priority=row["priority"],
            target=RuleTarget(row["target"]),
            effective_from=datetime.fromisoformat(row["effective_from"]),
            effective_to=(
                datetime.fromisoformat(row["effective_to"]) if row["effective_to"] else None
            ),
        )
