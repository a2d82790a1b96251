"""InvestmentApplicationService: product purchase, liquidation, maturity, drift."""

import logging
import random

from sqlalchemy.ext.asyncio import AsyncSession

from src.econ_bank.domain.models import Account
from src.econ_bank.domain.repository import (
    AccountRepositoryProtocol,
    CharacterGatewayProtocol,
)
from src.econ_bank.infrastructure.character_gateway import SqlCharacterGateway
from src.econ_bank.infrastructure.persistence import AccountRepository
from src.econ_common.cents import cents_to_display
from src.econ_common.datetime_utils import add_months, days_between, utc_now
from src.econ_common.enums import InvestmentStatus, TransactionType
from src.econ_common.errors import (
    AccountNotFoundError,
    AmountOutOfRangeError,
    CharacterNotFoundError,
    InsufficientBalanceError,
    InvestmentNotFoundError,
    ProductIneligibleError,
    ProductNotFoundError,
)
from src.econ_common.id_generator import generate_id
from src.econ_common.response import OperationResult
from src.econ_common.rng import simulation_rng
from src.econ_common.unit_of_work import run_batch, run_operation
from src.econ_invest.application.schemas import (
    HoldingItem,
    InvestmentPortfolioResponse,
    LiquidationResponse,
    ProductItem,
    PurchaseResponse,
)
from src.econ_invest.domain.catalog import PRODUCTS, available_products, get_product
from src.econ_invest.domain.models import Investment
from src.econ_invest.domain.repository import InvestmentRepositoryProtocol
from src.econ_invest.domain.valuation import (
    VARIATION_BANDS,
    days_remaining,
    expected_return,
    liquidation_value,
    market_linked_value,
    maturity_value,
    sample_variation,
)
from src.econ_invest.infrastructure.persistence import InvestmentRepository

logger = logging.getLogger(__name__)


class InvestmentApplicationService:
    def __init__(
        self,
        repo: InvestmentRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        characters: CharacterGatewayProtocol | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._repo: InvestmentRepositoryProtocol = repo or InvestmentRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._characters: CharacterGatewayProtocol = characters or SqlCharacterGateway()
        self._rng = rng or simulation_rng()

    async def _require_account(self, db: AsyncSession, character_id: str) -> Account:
        account = await self._accounts.get_account(db, character_id)
        if account is None:
            raise AccountNotFoundError(character_id)
        return account

    async def _character_level(self, db: AsyncSession, character_id: str) -> int:
        profile = await self._characters.get_profile(db, character_id)
        if profile is None:
            raise CharacterNotFoundError(character_id)
        return profile.level

    def list_products(self) -> list[ProductItem]:
        return [ProductItem.from_product(product) for product in PRODUCTS]

    async def list_available_products(
        self, db: AsyncSession, character_id: str
    ) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            level = await self._character_level(db, character_id)
            products = available_products(level, account.credit_score)
            return OperationResult.ok(
                f"{len(products)} products available",
                [ProductItem.from_product(product) for product in products],
            )

        return await run_operation(db, work)

    async def purchase(
        self, db: AsyncSession, character_id: str, product_id: str, amount: int
    ) -> OperationResult:
        async def work() -> OperationResult:
            product = get_product(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            if not product.min_amount <= amount <= product.max_amount:
                raise AmountOutOfRangeError(amount, product.min_amount, product.max_amount)

            account = await self._require_account(db, character_id)
            level = await self._character_level(db, character_id)
            if product.min_level is not None and level < product.min_level:
                raise ProductIneligibleError(f"requires level {product.min_level}")
            if (
                product.min_credit_score is not None
                and account.credit_score < product.min_credit_score
            ):
                raise ProductIneligibleError(
                    f"requires credit score {product.min_credit_score}"
                )
            if account.balance < amount:
                raise InsufficientBalanceError(amount, account.balance)

            now = utc_now()
            maturity = add_months(now, product.term_months) if product.term_months else None
            investment = await self._repo.create_investment(
                db,
                Investment(
                    id=generate_id("INV"),
                    account_id=account.id,
                    product_id=product.id,
                    investment_type=product.investment_type,
                    product_name=product.name,
                    principal=amount,
                    current_value=amount,
                    interest_rate=product.annual_return,
                    term_months=product.term_months,
                    status=InvestmentStatus.ACTIVE.value,
                    maturity_date=maturity,
                ),
            )
            await self._accounts.post_transaction(
                db,
                character_id,
                -amount,
                TransactionType.INVESTMENT.value,
                f"Investment purchase: {product.name}",
                reference_type="INVESTMENT",
                reference_id=investment.id,
            )
            logger.info(
                "Investment purchased: character=%s product=%s amount=%d",
                character_id, product.id, amount,
            )
            expected = expected_return(amount, product.annual_return, product.term_months)
            return OperationResult.ok(
                f"Purchased {product.name}",
                PurchaseResponse(
                    investment_id=investment.id,
                    product_name=product.name,
                    principal_cents=amount,
                    expected_return_cents=expected,
                    expected_return_display=cents_to_display(expected),
                    maturity_date=maturity.isoformat() if maturity else None,
                ),
            )

        return await run_operation(db, work)

    async def liquidate(
        self, db: AsyncSession, character_id: str, investment_id: str
    ) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            investment = await self._repo.get_for_update(db, investment_id)
            if (
                investment is None
                or investment.account_id != account.id
                or not investment.is_active
            ):
                raise InvestmentNotFoundError(investment_id)

            payout = liquidation_value(investment, utc_now())
            closed = await self._repo.close_investment(
                db, investment.id, InvestmentStatus.LIQUIDATED.value, payout
            )
            if closed is None:
                raise InvestmentNotFoundError(investment_id)
            await self._accounts.post_transaction(
                db,
                character_id,
                payout,
                TransactionType.INVESTMENT.value,
                f"Early liquidation: {investment.product_name}",
                reference_type="INVESTMENT",
                reference_id=investment.id,
            )
            penalty = max(0, investment.principal - payout)
            message = (
                f"Liquidated with {cents_to_display(penalty)} penalty"
                if penalty > 0
                else f"Liquidated for {cents_to_display(payout)}"
            )
            return OperationResult.ok(
                message,
                LiquidationResponse(
                    investment_id=investment.id,
                    payout_cents=payout,
                    payout_display=cents_to_display(payout),
                    penalty_cents=penalty,
                ),
            )

        return await run_operation(db, work)

    async def investments_for_account(
        self, db: AsyncSession, account_id: str
    ) -> list[Investment]:
        return await self._repo.list_by_account(db, account_id)

    async def summarize(self, db: AsyncSession) -> dict[str, int]:
        return await self._repo.summarize(db)

    async def get_portfolio(self, db: AsyncSession, character_id: str) -> OperationResult:
        async def work() -> OperationResult:
            account = await self._require_account(db, character_id)
            investments = await self._repo.list_by_account(db, account.id)
            now = utc_now()
            holdings = [
                HoldingItem.from_investment(
                    inv,
                    expected_return(inv.principal, inv.interest_rate, inv.term_months),
                    days_remaining(inv.maturity_date, now),
                )
                for inv in investments
            ]
            active_value = sum(inv.current_value for inv in investments if inv.is_active)
            return OperationResult.ok(
                f"{len(holdings)} investments",
                InvestmentPortfolioResponse(
                    holdings=holdings,
                    active_value_cents=active_value,
                    active_value_display=cents_to_display(active_value),
                ),
            )

        return await run_operation(db, work)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def process_matured_investments(self, db: AsyncSession) -> int:
        """Pay out every ACTIVE investment whose maturity date has passed."""
        matured = await self._repo.list_matured(db, utc_now())

        async def settle(investment: Investment) -> bool:
            value = maturity_value(investment)
            closed = await self._repo.close_investment(
                db, investment.id, InvestmentStatus.MATURED.value, value
            )
            if closed is None:
                return False
            await self._accounts.post_transaction(
                db,
                investment.character_id,
                value,
                TransactionType.INVESTMENT.value,
                f"Investment matured: {investment.product_name}",
                reference_type="INVESTMENT",
                reference_id=investment.id,
                require_active=False,
            )
            logger.info("Investment %s matured at %d", investment.id, value)
            return True

        settled = await run_batch(db, "process_matured_investments", matured, settle)
        logger.info("Processed %d/%d matured investments", settled, len(matured))
        return settled

    async def update_market_linked_values(self, db: AsyncSession) -> int:
        """Revalue mutual funds and investment insurance with a fresh daily draw."""
        holdings = await self._repo.list_active_by_types(db, list(VARIATION_BANDS))
        now = utc_now()

        async def revalue(investment: Investment) -> bool:
            variation = sample_variation(self._rng, investment.investment_type)
            days = days_between(investment.invested_at or now, now)
            value = market_linked_value(
                investment.principal, investment.interest_rate, days, variation
            )
            return await self._repo.update_current_value(db, investment.id, value)

        updated = await run_batch(db, "update_market_linked_values", holdings, revalue)
        logger.info("Revalued %d market-linked investments", updated)
        return updated
