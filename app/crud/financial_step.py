from typing import List, Optional, Dict, Tuple, Type, Any
from datetime import date
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import SQLAlchemyError
import logging
from app.db.base_class import Base
from app.db.models import (
    FinancialStep, BankAccount, BankStatement, CreditCard, CardStatement,
    Loan, Mortgage, HirePurchaseAgreement,
)
from app.schemas.financial_step import FinancialStepSave

logger = logging.getLogger(__name__)

SCALAR_FIELDS = ("credit_card_interest", "financial_assessment", "assessment_notes")

# Collection attribute -> row model
COLLECTIONS: Dict[str, Type[Base]] = {
    "bank_accounts": BankAccount,
    "credit_cards": CreditCard,
    "loans": Loan,
    "mortgages": Mortgage,
    "hire_purchase_agreements": HirePurchaseAgreement,
}

# Statement kind -> (owner model, statement model, owner relationship, owner fk)
STATEMENT_KINDS: Dict[str, Tuple[Any, Any, str, str]] = {
    "card": (CreditCard, CardStatement, "credit_card", "credit_card_id"),
    "bank": (BankAccount, BankStatement, "bank_account", "bank_account_id"),
}

def _financial_step_query():
    return (
        select(FinancialStep)
        .options(
            selectinload(FinancialStep.bank_accounts).selectinload(BankAccount.bank_statements),
            selectinload(FinancialStep.credit_cards).selectinload(CreditCard.card_statements),
            selectinload(FinancialStep.loans),
            selectinload(FinancialStep.mortgages),
            selectinload(FinancialStep.hire_purchase_agreements),
        )
        .execution_options(populate_existing=True)
    )

async def get_financial_step(db: AsyncSession, claim_id: str) -> Optional[FinancialStep]:
    """
    Get the financial step of a claim with every collection and statement loaded.
    """
    try:
        result = await db.execute(_financial_step_query().where(FinancialStep.claim_id == claim_id))
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_financial_step: {e}")
        return None

def _sync_collection(step: FinancialStep, attr: str, items: List[Any]) -> None:
    """
    Make ``step.<attr>`` match ``items`` in order.

    Items whose id names an existing row update it in place, so rows keep
    their statements. Other items become new rows; rows not named by any item
    are dropped as orphans.
    """
    model = COLLECTIONS[attr]
    existing = {row.id: row for row in getattr(step, attr)}
    rows = []
    for position, item in enumerate(items):
        values = item.model_dump(exclude={"id"})
        row = existing.pop(item.id, None) if item.id else None
        if row is None:
            row = model(**values)
        else:
            for field, value in values.items():
                setattr(row, field, value)
        row.position = position
        rows.append(row)
    setattr(step, attr, rows)
    if existing:
        logger.info(f"Removing {len(existing)} row(s) from {attr} of financial step {step.id}")

async def save_financial_step(db: AsyncSession, claim_id: str, data: FinancialStepSave) -> Optional[FinancialStep]:
    """
    Create or update the financial step of a claim.

    Scalar fields and collections are only written when present in the payload.
    """
    try:
        step = await get_financial_step(db, claim_id)
        if step is None:
            step = FinancialStep(claim_id=claim_id)
            db.add(step)

        provided = data.model_fields_set
        for field in SCALAR_FIELDS:
            if field in provided:
                setattr(step, field, getattr(data, field))

        for attr in COLLECTIONS:
            if attr in provided:
                _sync_collection(step, attr, getattr(data, attr) or [])

        await db.commit()
        return await get_financial_step(db, claim_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in save_financial_step: {e}")
        return None

async def delete_financial_step(db: AsyncSession, claim_id: str) -> bool:
    try:
        step = await get_financial_step(db, claim_id)
        if not step:
            return False

        await db.delete(step)
        await db.commit()
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_financial_step: {e}")
        return False

async def get_statement_owner(db: AsyncSession, kind: str, owner_id: str):
    """
    Get the credit card or bank account a statement is filed under, with its
    financial step loaded for the ownership check.
    """
    owner_model = STATEMENT_KINDS[kind][0]
    try:
        result = await db.execute(
            select(owner_model)
            .options(selectinload(owner_model.financial_step))
            .where(owner_model.id == owner_id)
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_statement_owner: {e}")
        return None

async def get_statement(db: AsyncSession, kind: str, statement_id: str):
    owner_model, statement_model, owner_attr, _ = STATEMENT_KINDS[kind]
    try:
        result = await db.execute(
            select(statement_model)
            .options(
                selectinload(getattr(statement_model, owner_attr))
                .selectinload(owner_model.financial_step)
            )
            .where(statement_model.id == statement_id)
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_statement: {e}")
        return None

async def create_statement(
    db: AsyncSession,
    kind: str,
    owner_id: str,
    start_date: date,
    end_date: date,
    file_key: str,
    file_name: str,
):
    statement_model, owner_fk = STATEMENT_KINDS[kind][1], STATEMENT_KINDS[kind][3]
    try:
        statement = statement_model(
            start_date=start_date,
            end_date=end_date,
            file_key=file_key,
            file_name=file_name,
            **{owner_fk: owner_id},
        )
        db.add(statement)
        await db.commit()
        await db.refresh(statement)
        return statement
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in create_statement: {e}")
        return None

async def delete_statement(db: AsyncSession, statement) -> bool:
    try:
        await db.delete(statement)
        await db.commit()
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_statement: {e}")
        return False
