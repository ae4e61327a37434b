# backend/booking_engine/routers/catalog.py
# Services and customers: plain create/read, PATCH and DELETE not exposed.

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Customers as DBCustomers, Services as DBServices
from ..schemas.catalog import CustomerCreate, CustomerRead, ServiceCreate, ServiceRead

services_router = APIRouter(prefix="/services", tags=["services"])
customers_router = APIRouter(prefix="/customers", tags=["customers"])


@services_router.get("/", response_model=list[ServiceRead])
def list_services(db: Session = Depends(get_db)):
    return db.query(DBServices).filter(DBServices.is_active == 1).all()


@services_router.get("/{id}", response_model=ServiceRead)
def get_service(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBServices, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@services_router.post("/", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
def create_service(data: ServiceCreate, db: Session = Depends(get_db)):
    obj = DBServices(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@customers_router.get("/", response_model=list[CustomerRead])
def list_customers(db: Session = Depends(get_db)):
    return db.query(DBCustomers).all()


@customers_router.get("/{id}", response_model=CustomerRead)
def get_customer(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBCustomers, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@customers_router.post("/", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(data: CustomerCreate, db: Session = Depends(get_db)):
    obj = DBCustomers(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
