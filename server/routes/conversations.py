"""Conversation history endpoints."""

import asyncio

from fastapi import APIRouter, Depends, status

from server.dependencies import get_api_key, get_conversation_store
from server.schemas.requests import (
    AddMessageRequest,
    CreateConversationRequest,
    SaveEmailRequest,
    UpdateEmailRequest,
    UpdateProfileRequest,
)
from server.schemas.responses import ConversationDTO, DeleteResponseDTO, MessageDTO
from server.utils import error_response

router = APIRouter(
    prefix="/v1/conversations", tags=["Conversations"], dependencies=[Depends(get_api_key)]
)


def _not_found(conversation_id: str | None = None):
    details = f"Conversation {conversation_id} not found" if conversation_id else None
    return error_response("Conversation not found", details, status.HTTP_404_NOT_FOUND)


def _dto(conversation) -> ConversationDTO:
    return ConversationDTO.model_validate(conversation.to_dict())


@router.get("", response_model=list[ConversationDTO], response_model_exclude_none=True)
async def list_conversations(store=Depends(get_conversation_store)):
    conversations = await asyncio.to_thread(store.list_conversations)
    return [_dto(c) for c in conversations]


@router.post(
    "",
    response_model=ConversationDTO,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversation(
    body: CreateConversationRequest | None = None, store=Depends(get_conversation_store)
):
    title = body.title if body else None
    return _dto(await asyncio.to_thread(store.create_conversation, title))


@router.delete("", response_model=DeleteResponseDTO)
async def clear_conversations(store=Depends(get_conversation_store)):
    await asyncio.to_thread(store.clear_all)
    return DeleteResponseDTO(success=True)


@router.get("/current", response_model=ConversationDTO, response_model_exclude_none=True)
async def current_conversation(store=Depends(get_conversation_store)):
    conversation = await asyncio.to_thread(store.current_conversation)
    if conversation is None:
        return _not_found()
    return _dto(conversation)


@router.get(
    "/{conversation_id}", response_model=ConversationDTO, response_model_exclude_none=True
)
async def get_conversation(conversation_id: str, store=Depends(get_conversation_store)):
    conversation = await asyncio.to_thread(store.get_conversation, conversation_id)
    if conversation is None:
        return _not_found(conversation_id)
    return _dto(conversation)


@router.post(
    "/{conversation_id}/switch",
    response_model=ConversationDTO,
    response_model_exclude_none=True,
)
async def switch_conversation(conversation_id: str, store=Depends(get_conversation_store)):
    conversation = await asyncio.to_thread(store.switch_conversation, conversation_id)
    if conversation is None:
        return _not_found(conversation_id)
    return _dto(conversation)


@router.delete("/{conversation_id}", response_model=DeleteResponseDTO)
async def delete_conversation(conversation_id: str, store=Depends(get_conversation_store)):
    if not await asyncio.to_thread(store.delete_conversation, conversation_id):
        return _not_found(conversation_id)
    return DeleteResponseDTO(success=True)


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageDTO,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def add_message(
    conversation_id: str, body: AddMessageRequest, store=Depends(get_conversation_store)
):
    message = await asyncio.to_thread(
        store.add_message,
        body.type,
        body.content,
        [r.to_domain() for r in body.search_results] if body.search_results is not None else None,
        body.profile.to_domain() if body.profile else None,
        body.email_data.to_domain() if body.email_data else None,
        conversation_id,
    )
    if message is None:
        return _not_found(conversation_id)
    return MessageDTO.model_validate(message.to_dict())


@router.put(
    "/{conversation_id}/profile",
    response_model=ConversationDTO,
    response_model_exclude_none=True,
)
async def update_profile(
    conversation_id: str, body: UpdateProfileRequest, store=Depends(get_conversation_store)
):
    conversation = await asyncio.to_thread(
        store.update_profile, body.profile.to_domain(), conversation_id
    )
    if conversation is None:
        return _not_found(conversation_id)
    return _dto(conversation)


@router.post(
    "/{conversation_id}/emails",
    response_model=ConversationDTO,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def save_email(
    conversation_id: str, body: SaveEmailRequest, store=Depends(get_conversation_store)
):
    conversation = await asyncio.to_thread(
        store.save_email, body.email.to_domain(), conversation_id
    )
    if conversation is None:
        return _not_found(conversation_id)
    return _dto(conversation)


@router.put(
    "/{conversation_id}/emails",
    response_model=ConversationDTO,
    response_model_exclude_none=True,
)
async def update_email(
    conversation_id: str, body: UpdateEmailRequest, store=Depends(get_conversation_store)
):
    """Replace the email at `index` (the latest one when absent or out of range)."""
    conversation = await asyncio.to_thread(
        store.update_email, body.email.to_domain(), body.index, conversation_id
    )
    if conversation is None:
        return _not_found(conversation_id)
    return _dto(conversation)
