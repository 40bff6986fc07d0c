from fastapi import APIRouter, Depends, HTTPException, status

from thanos_finance.core.store import FinanceStore
from thanos_finance.services.chat import AdvisorChat
from thanos_finance.web.dependencies import get_advisor, get_store
from thanos_finance.web.schemas import ChatIn

router = APIRouter(prefix="/api/chat", tags=["chat"])

@router.get("")
async def list_messages(store: FinanceStore = Depends(get_store)):
    return [m.to_dict() for m in store.chat_messages]

@router.post("")
async def send_message(body: ChatIn, advisor: AdvisorChat = Depends(get_advisor)):
    """
    Ask the advisor.

    422 for blank text, 409 while the previous request is pending.
    """
    if not body.text.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="A mensagem não pode ficar vazia"
        )

    if advisor.busy:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="O mentor ainda está respondendo"
        )

    turn = await advisor.send(body.text)
    if turn is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="O mentor ainda está respondendo"
        )
    return turn.to_dict()
