"""POST /v1/transactions - record income/expense and recalculate the user's plan"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from savings_gateway.api.v1.schemas import TransactionRequest, TransactionResponse, TransactionSchema, ProfileSchema, GoalSchema
from savings_gateway.api.dependencies import get_current_user_id, get_request_id
from savings_gateway.infrastructure.database.session import get_db
from savings_gateway.services.transactions import TransactionService
from savings_gateway.domain.exceptions import (
    ConcurrentUpdateError,
    MissingGoalSetError,
    MissingProfileError,
    RecalculationError,
)

router = APIRouter()


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request_body: TransactionRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Record a transaction and recalculate balances, targets and goal statuses.

    Flow:
    1. Positive amount: credit balance, allocate income to goals by category weight
    2. Negative amount: debit balance, check today's spending against the allowance
    3. Recompute savings target, spending buffer, buffer status and goal statuses
    4. Persist transaction, profile and goals atomically
    """
    request_id = get_request_id(request)

    try:
        outcome = TransactionService(db).apply_transaction(
            user_id=user_id,
            amount=request_body.amount,
            note=request_body.note,
        )

    except MissingProfileError as e:
        logging.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Profile not found")

    except MissingGoalSetError as e:
        logging.error(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Goals unavailable")

    except ConcurrentUpdateError as e:
        logging.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Profile changed concurrently, retry the transaction")

    except RecalculationError as e:
        logging.error(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to process transaction")

    return TransactionResponse(
        transaction=TransactionSchema.from_domain(outcome.transaction),
        profile=ProfileSchema.from_domain(outcome.profile),
        goals=[GoalSchema.from_domain(goal) for goal in outcome.goals],
    )
