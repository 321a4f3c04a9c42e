"""
Audio router.

Upload, serve and delete the pronunciation clip for a card. Uploading or
deleting a clip also updates the card's ``hasAudio`` flag when the card exists
(clips may be uploaded before the card itself is saved).
"""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from loguru import logger

from config import Settings
from lexicards.api.dependencies import current_user, get_app_settings, get_audio_store, get_card_store
from lexicards.storage import AudioNotFoundError, AudioStore, CardNotFoundError, CardStore, StorageError

router = APIRouter()


def _sync_flag(store: CardStore, username: str, card_id: str, has_audio: bool) -> None:
    try:
        store.set_has_audio(username, card_id, has_audio)
    except CardNotFoundError:
        logger.debug(f"Audio for unsaved card {card_id}; flag not updated")


@router.get("/{card_id}", summary="Stream a card's clip")
def get_audio(
    card_id: str,
    username: str = Depends(current_user),
    audio: AudioStore = Depends(get_audio_store),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    try:
        data = audio.load(username, card_id)
    except AudioNotFoundError:
        raise HTTPException(status_code=404, detail="Audio not found")
    return Response(content=data, media_type=settings.audio_content_type)


@router.post("/{card_id}", summary="Upload a card's clip")
async def upload_audio(
    card_id: str,
    file: UploadFile | None = File(None, alias="audio"),
    username: str = Depends(current_user),
    audio: AudioStore = Depends(get_audio_store),
    cards: CardStore = Depends(get_card_store),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, bool]:
    data = await file.read() if file is not None else b""
    if not data:
        raise HTTPException(status_code=400, detail="No audio file provided")
    if len(data) > settings.audio_max_bytes:
        raise HTTPException(status_code=413, detail="Audio file too large")

    try:
        audio.save(username, card_id, data)
    except AudioNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError:
        logger.exception("Audio upload failed")
        raise HTTPException(status_code=500, detail="Audio upload failed")

    _sync_flag(cards, username, card_id, True)
    return {"success": True}


@router.delete("/{card_id}", summary="Delete a card's clip")
def delete_audio(
    card_id: str,
    username: str = Depends(current_user),
    audio: AudioStore = Depends(get_audio_store),
    cards: CardStore = Depends(get_card_store),
) -> Dict[str, bool]:
    audio.delete(username, card_id)
    _sync_flag(cards, username, card_id, False)
    return {"success": True}
