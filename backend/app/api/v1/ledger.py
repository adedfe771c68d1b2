"""
Ledger Endpoints

Fund accounts and set allowances on the shared in-memory token ledger.
"""
from fastapi import APIRouter, Depends, HTTPException

from app.api.schemas import ApproveRequest, BalanceResponse, MintRequest
from app.core.registry import PoolRegistry, get_registry

router = APIRouter()


@router.post("/ledger/mint", response_model=BalanceResponse)
async def mint(request: MintRequest, registry: PoolRegistry = Depends(get_registry)):
    try:
        registry.ledger.mint(request.token, request.account, request.amount)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return BalanceResponse(
        token=request.token,
        account=request.account,
        balance=registry.ledger.balance_of(request.token, request.account),
    )


@router.post("/ledger/approve")
async def approve(request: ApproveRequest, registry: PoolRegistry = Depends(get_registry)):
    try:
        registry.ledger.approve(request.token, request.owner, request.spender, request.amount)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {
        "token": request.token,
        "owner": request.owner,
        "spender": request.spender,
        "allowance": registry.ledger.allowance(request.token, request.owner, request.spender),
    }


@router.get("/ledger/{token}/{account}", response_model=BalanceResponse)
async def balance(token: str, account: str, registry: PoolRegistry = Depends(get_registry)):
    return BalanceResponse(token=token, account=account, balance=registry.ledger.balance_of(token, account))
