"""Livestock records and their journal notes."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_specimen_repository
from app.schemas import (
    Acknowledgement,
    NoteCreate,
    Specimen,
    SpecimenCreate,
    SpecimenNote,
    SpecimenUpdate,
)
from datastore.specimens import SpecimenRepository

router = APIRouter(prefix="/api/specimens", tags=["specimens"])


def _not_found(detail: str = "Specimen not found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@router.get("", response_model=List[Specimen], summary="List specimens, newest first.")
async def list_specimens(
    specimens: SpecimenRepository = Depends(get_specimen_repository),
) -> List[Specimen]:
    return specimens.list_specimens()


@router.post("", response_model=Specimen, status_code=status.HTTP_201_CREATED)
async def create_specimen(
    payload: SpecimenCreate,
    specimens: SpecimenRepository = Depends(get_specimen_repository),
) -> Specimen:
    return specimens.create(payload)


@router.get("/{specimen_id}", response_model=Specimen)
async def get_specimen(
    specimen_id: str,
    specimens: SpecimenRepository = Depends(get_specimen_repository),
) -> Specimen:
    try:
        return specimens.get_specimen(specimen_id)
    except KeyError as exc:
        raise _not_found() from exc


@router.put("/{specimen_id}", response_model=Specimen)
async def update_specimen(
    specimen_id: str,
    payload: SpecimenUpdate,
    specimens: SpecimenRepository = Depends(get_specimen_repository),
) -> Specimen:
    try:
        return specimens.update(specimen_id, payload)
    except KeyError as exc:
        raise _not_found() from exc


@router.delete("/{specimen_id}", response_model=Acknowledgement)
async def delete_specimen(
    specimen_id: str,
    specimens: SpecimenRepository = Depends(get_specimen_repository),
) -> Acknowledgement:
    try:
        specimens.delete(specimen_id)
    except KeyError as exc:
        raise _not_found() from exc
    return Acknowledgement()


@router.get("/{specimen_id}/notes", response_model=List[SpecimenNote])
async def list_notes(
    specimen_id: str,
    specimens: SpecimenRepository = Depends(get_specimen_repository),
) -> List[SpecimenNote]:
    try:
        return specimens.list_notes(specimen_id)
    except KeyError as exc:
        raise _not_found() from exc


@router.post(
    "/{specimen_id}/notes",
    response_model=SpecimenNote,
    status_code=status.HTTP_201_CREATED,
)
async def add_note(
    specimen_id: str,
    payload: NoteCreate,
    specimens: SpecimenRepository = Depends(get_specimen_repository),
) -> SpecimenNote:
    try:
        return specimens.add_note(specimen_id, payload.content)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except KeyError as exc:
        raise _not_found() from exc


@router.delete("/{specimen_id}/notes", response_model=Acknowledgement)
async def clear_notes(
    specimen_id: str,
    specimens: SpecimenRepository = Depends(get_specimen_repository),
) -> Acknowledgement:
    try:
        specimens.clear_notes(specimen_id)
    except KeyError as exc:
        raise _not_found() from exc
    return Acknowledgement()


@router.delete("/{specimen_id}/notes/{note_id}", response_model=Acknowledgement)
async def delete_note(
    specimen_id: str,
    note_id: str,
    specimens: SpecimenRepository = Depends(get_specimen_repository),
) -> Acknowledgement:
    try:
        specimens.delete_note(specimen_id, note_id)
    except KeyError as exc:
        raise _not_found("Note not found") from exc
    return Acknowledgement()
