# backend/routes/parties.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from models.party import Party
from models.purchase import Purchase
from models.sale import Sale
from models.enums import PartyType
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.records import get_owned, apply_changes, search_filter
from utils.ledger import adjust_balance
from schemas.common import Envelope
from schemas.party import PartyCreate, PartyUpdate, PartyOut, BalanceUpdate

router = APIRouter(prefix="/api/parties", tags=["Parties"])

ADDRESS_COLUMNS = {
    "street": "address_street",
    "city": "address_city",
    "state": "address_state",
    "pincode": "address_pincode",
    "country": "address_country",
}


# Flatten a nested address payload into the address_* columns
def _address_columns(address: Optional[dict]) -> dict:
    if not address:
        return {}
    return {ADDRESS_COLUMNS[k]: v for k, v in address.items() if k in ADDRESS_COLUMNS}


# Existing purchases need a supplier, existing sales a customer
def _ensure_role_kept(db: Session, party: Party, new_type: PartyType) -> None:
    if not new_type.can_supply() and db.query(Purchase.id).filter(Purchase.party_id == party.id).first():
        raise HTTPException(status_code=400, detail="Party has purchases and must remain a supplier")
    if not new_type.can_buy() and db.query(Sale.id).filter(Sale.party_id == party.id).first():
        raise HTTPException(status_code=400, detail="Party has sales and must remain a customer")


@router.post("", status_code=201, response_model=Envelope[PartyOut])
def create_party(
    payload: PartyCreate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    data = payload.model_dump()
    data.update(_address_columns(data.pop("address", None)))

    # A new party starts with its opening balance outstanding
    party = Party(user_id=current_user.id, current_balance=data["opening_balance"], **data)
    db.add(party)
    db.commit()
    db.refresh(party)

    write_log(
        db, user_id=current_user.id, action="PARTY_CREATE", resource="parties",
        status="SUCCESS", ip=client_ip(request), meta={"id": party.id, "type": party.type.value},
    )
    return {"success": True, "message": "Party created successfully", "data": party}


@router.get("", response_model=Envelope[List[PartyOut]])
def list_parties(
    type: Optional[PartyType] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    query = db.query(Party).filter(Party.user_id == current_user.id)
    if type is not None:
        query = query.filter(Party.type == type)
    if is_active is not None:
        query = query.filter(Party.is_active == is_active)
    if search:
        query = query.filter(or_(search_filter(Party.name, search), search_filter(Party.phone, search)))

    parties = query.order_by(Party.created_at.desc(), Party.id.desc()).all()
    return {"success": True, "count": len(parties), "data": parties}


@router.get("/{party_id}", response_model=Envelope[PartyOut])
def get_party(
    party_id: int,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    party = get_owned(db, Party, current_user.id, party_id, "Party")
    return {"success": True, "data": party}


@router.put("/{party_id}", response_model=Envelope[PartyOut])
def update_party(
    party_id: int, payload: PartyUpdate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    party = get_owned(db, Party, current_user.id, party_id, "Party")

    changes = payload.model_dump(exclude_unset=True)
    new_type = changes.get("type")
    if new_type is not None and new_type != party.type:
        _ensure_role_kept(db, party, new_type)

    address = changes.pop("address", None)
    if address is not None:
        # Only the address parts that were sent are replaced
        sent = payload.address.model_dump(exclude_unset=True)
        changes.update(_address_columns(sent))

    apply_changes(party, changes, required={"name", "type", "opening_balance", "credit_limit", "is_active"})
    db.commit()
    db.refresh(party)

    write_log(
        db, user_id=current_user.id, action="PARTY_UPDATE", resource="parties",
        status="SUCCESS", ip=client_ip(request), meta={"id": party.id},
    )
    return {"success": True, "message": "Party updated successfully", "data": party}


@router.delete("/{party_id}", response_model=Envelope)
def delete_party(
    party_id: int, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    party = get_owned(db, Party, current_user.id, party_id, "Party")

    has_documents = (
        db.query(Purchase.id).filter(Purchase.party_id == party.id).first()
        or db.query(Sale.id).filter(Sale.party_id == party.id).first()
    )
    if has_documents:
        raise HTTPException(status_code=400, detail="Party has purchases or sales and cannot be deleted")

    pid = party.id
    db.delete(party)
    db.commit()

    write_log(
        db, user_id=current_user.id, action="PARTY_DELETE", resource="parties",
        status="SUCCESS", ip=client_ip(request), meta={"id": pid},
    )
    return {"success": True, "message": "Party deleted successfully"}


# Manual balance adjustment; purchases and sales never touch the balance
@router.patch("/{party_id}/balance", response_model=Envelope[PartyOut])
def update_balance(
    party_id: int, payload: BalanceUpdate, request: Request,
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user),
):
    party = get_owned(db, Party, current_user.id, party_id, "Party", lock=True)

    old_balance = party.current_balance
    party.current_balance = adjust_balance(party.current_balance, payload.amount, payload.type)
    db.commit()
    db.refresh(party)

    write_log(
        db, user_id=current_user.id, action="PARTY_BALANCE", resource="parties",
        status="SUCCESS", ip=client_ip(request),
        meta={"id": party.id, "old": old_balance, "new": party.current_balance, "type": payload.type},
    )
    return {"success": True, "message": "Balance updated successfully", "data": party}
