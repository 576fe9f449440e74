from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile

from src.adapters.fs.uploads import UploadStore
from src.api.deps import get_ledger, get_upload_store
from src.api.schemas import CreatorUpdateRequest
from src.components.accounts import (
    CreateCreatorInput,
    UpdateCreatorInput,
    Upload,
    get_creator,
    list_creators,
    run_create_creator,
    run_update_creator,
)
from src.components.ledger import LedgerStore

router = APIRouter()


async def read_upload(field_name: str, file: UploadFile | None) -> Upload | None:
    if file is None or not file.filename:
        return None
    return Upload(
        field_name=field_name,
        filename=file.filename,
        data=await file.read(),
        content_type=file.content_type,
    )


@router.post("")
async def create_creator(
    display_name: str | None = Form(None, alias="displayName"),
    username: str | None = Form(None),
    email: str | None = Form(None),
    account_type: str | None = Form(None, alias="accountType"),
    price: str | None = Form(None),
    id_front: UploadFile | None = File(None, alias="idFront"),
    id_back: UploadFile | None = File(None, alias="idBack"),
    selfie: UploadFile | None = File(None),
    ledger: LedgerStore = Depends(get_ledger),
    files: UploadStore = Depends(get_upload_store),
) -> dict[str, Any]:
    """Onboard a creator with optional identity verification files."""
    uploads = {}
    for name, file in (("idFront", id_front), ("idBack", id_back), ("selfie", selfie)):
        upload = await read_upload(name, file)
        if upload is not None:
            uploads[name] = upload

    result = run_create_creator(
        CreateCreatorInput(
            display_name=display_name,
            username=username,
            email=email,
            account_type=account_type,
            price=price,
            uploads=uploads,
        ),
        repo=ledger,
        files=files,
    )
    return {"success": True, "creatorId": result.creator.id}


@router.get("")
def list_all_creators(ledger: LedgerStore = Depends(get_ledger)) -> list[dict[str, Any]]:
    return [c.model_dump(mode="json", by_alias=True) for c in list_creators(repo=ledger)]


@router.get("/{username}")
def get_one_creator(username: str, ledger: LedgerStore = Depends(get_ledger)) -> dict[str, Any]:
    return get_creator(username, repo=ledger).model_dump(mode="json", by_alias=True)


@router.patch("/{username}")
def update_creator(
    username: str,
    req: CreatorUpdateRequest,
    ledger: LedgerStore = Depends(get_ledger),
) -> dict[str, Any]:
    result = run_update_creator(
        UpdateCreatorInput(
            username=username,
            display_name=req.display_name,
            account_type=req.account_type,
            price=req.price,
        ),
        repo=ledger,
    )
    return {"success": True, "creator": result.creator.model_dump(mode="json", by_alias=True)}
