"""Admin-only LLM assistant conversations."""

import logging

from fastapi import APIRouter, Depends, Request

from transcript_hub.db import User, utcnow
from transcript_hub.models import (
    ConversationCreate,
    ConversationOut,
    ConversationUpdate,
    Message,
    MessageIn,
    Role,
)
from transcript_hub.storage import Storage
from .deps import get_storage, require_role, run_blocking

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assistant/conversations", tags=["assistant"])

admin_only = require_role(Role.ADMIN)


@router.get("", response_model=list[ConversationOut])
def list_conversations(
    user: User = Depends(admin_only),
    storage: Storage = Depends(get_storage),
):
    return [ConversationOut.model_validate(c) for c in storage.list_conversations(user.id)]


@router.post("", response_model=ConversationOut)
def create_conversation(
    body: ConversationCreate,
    request: Request,
    user: User = Depends(admin_only),
    storage: Storage = Depends(get_storage),
):
    conversation = storage.create_conversation(
        user.id,
        body.title,
        body.model or request.app.state.settings.gemini_default_model,
        body.system_prompt,
    )
    return ConversationOut.model_validate(conversation)


@router.get("/{conversation_id}", response_model=ConversationOut)
def get_conversation(
    conversation_id: int,
    user: User = Depends(admin_only),
    storage: Storage = Depends(get_storage),
):
    return ConversationOut.model_validate(storage.get_conversation(conversation_id, user.id))


@router.put("/{conversation_id}", response_model=ConversationOut)
def update_conversation(
    conversation_id: int,
    body: ConversationUpdate,
    user: User = Depends(admin_only),
    storage: Storage = Depends(get_storage),
):
    changes = body.model_dump(exclude_unset=True)
    changes = {k: v for k, v in changes.items() if v is not None or k == "system_prompt"}
    conversation = storage.update_conversation(conversation_id, user.id, changes)
    return ConversationOut.model_validate(conversation)


@router.delete("/{conversation_id}", response_model=Message)
def delete_conversation(
    conversation_id: int,
    user: User = Depends(admin_only),
    storage: Storage = Depends(get_storage),
):
    storage.delete_conversation(conversation_id, user.id)
    return Message(message="Conversation deleted successfully")


@router.post("/{conversation_id}/message", response_model=ConversationOut)
async def send_message(
    conversation_id: int,
    body: MessageIn,
    request: Request,
    user: User = Depends(admin_only),
    storage: Storage = Depends(get_storage),
):
    """Send a message and store it together with the model's reply.

    Nothing is stored when the model call fails.
    """
    conversation = await run_blocking(storage.get_conversation, conversation_id, user.id)
    history = [
        {"role": m["role"], "content": m["content"]} for m in conversation.messages or []
    ]
    history.append({"role": "user", "content": body.message})

    reply = await request.app.state.assistant.generate(
        conversation.model, history, conversation.system_prompt
    )

    now = utcnow().isoformat()
    conversation = await run_blocking(
        storage.append_messages,
        conversation_id,
        user.id,
        [
            {"role": "user", "content": body.message, "createdAt": now},
            {"role": "model", "content": reply, "createdAt": utcnow().isoformat()},
        ],
    )
    logger.info(f"Assistant reply in conversation {conversation_id} ({conversation.model})")
    return ConversationOut.model_validate(conversation)
