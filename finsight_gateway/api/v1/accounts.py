"""GET /v1/accounts - Accounts grouped by institution"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from finsight_gateway.api.v1.schemas import AccountsResponse, InstitutionSchema
from finsight_gateway.api.dependencies import get_current_user_id
from finsight_gateway.domain.accounts import group_by_institution
from finsight_gateway.infrastructure.database.session import get_db
from finsight_gateway.infrastructure.database.repositories import AccountRepository

router = APIRouter()


@router.get("/accounts", response_model=AccountsResponse)
def get_accounts(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Retrieve the user's accounts grouped by institution.

    Returns:
        Institutions with their accounts and combined balance
    """
    accounts = AccountRepository(db).list_for_user(user_id)
    return AccountsResponse(
        institutions=[InstitutionSchema.model_validate(i) for i in group_by_institution(accounts)]
    )
