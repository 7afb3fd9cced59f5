# pos_api/routers/customers.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user
from pos_api.models.customers import Customer
from pos_api.schemas.customer import CustomerCreate, CustomerResponse

router = APIRouter(
    prefix="/api/customers",
    tags=["Customers"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=list[CustomerResponse])
def list_customers(db: Session = Depends(get_db)):
    return db.query(Customer).order_by(Customer.name).all()


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
):
    customer = Customer(**customer_data.model_dump())

    db.add(customer)
    db.commit()
    db.refresh(customer)

    return customer


@router.get("/phone/{phone}", response_model=CustomerResponse)
def get_customer_by_phone(phone: str, db: Session = Depends(get_db)):
    customer = db.query(Customer).filter(Customer.phone == phone).first()

    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    return customer
