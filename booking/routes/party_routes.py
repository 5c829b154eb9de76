from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking.core.errors import NO_BUYER_FOUND, NO_VENDOR_FOUND, BusinessRuleError
from booking.database import get_db
from booking.models.buyer import Buyer, Company
from booking.models.vendor import Vendor
from booking.schemas.appointment import MAX_ID, MIN_ID
from booking.schemas.party import BuyerResponse, CreateBuyerRequest, CreateVendorRequest, VendorResponse

router = APIRouter(tags=['parties'])


def to_buyer_response(buyer: Buyer) -> BuyerResponse:
    return BuyerResponse(id=buyer.id, name=buyer.name, company_id=buyer.company_id)


@router.post('/vendors', response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
def create_vendor(data: CreateVendorRequest, db: Session = Depends(get_db)):
    vendor = Vendor(name=data.name)
    try:
        db.add(vendor)
        db.commit()
        db.refresh(vendor)
    except SQLAlchemyError:
        db.rollback()
        raise

    return vendor


@router.get('/vendors/{vendor_id}', response_model=VendorResponse)
def get_vendor(vendor_id: int = Path(ge=MIN_ID, le=MAX_ID), db: Session = Depends(get_db)):
    vendor = db.get(Vendor, vendor_id)
    if vendor is None:
        raise BusinessRuleError(NO_VENDOR_FOUND)
    return vendor


@router.post('/buyers', response_model=BuyerResponse, status_code=status.HTTP_201_CREATED)
def create_buyer(data: CreateBuyerRequest, db: Session = Depends(get_db)):
    try:
        company_id = None
        if data.company_name:
            company = db.query(Company).filter(Company.name == data.company_name).first()
            if company is None:
                company = Company(name=data.company_name)
                db.add(company)
                db.flush()
            company_id = company.id

        buyer = Buyer(name=data.name, company_id=company_id)
        db.add(buyer)
        db.commit()
        db.refresh(buyer)
    except SQLAlchemyError:
        db.rollback()
        raise

    return to_buyer_response(buyer)


@router.get('/buyers/{buyer_id}', response_model=BuyerResponse)
def get_buyer(buyer_id: int = Path(ge=MIN_ID, le=MAX_ID), db: Session = Depends(get_db)):
    buyer = db.get(Buyer, buyer_id)
    if buyer is None:
        raise BusinessRuleError(NO_BUYER_FOUND)
    return to_buyer_response(buyer)
