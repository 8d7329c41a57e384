from sqlalchemy import Column, DateTime, Integer, String

from crm.core.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    contact = Column(String(50), nullable=False, default="")
    email = Column(String(100), nullable=False, default="")
    date_of_birth = Column(DateTime, nullable=False)
