# motorent/models/crm.py
import enum
from sqlalchemy import Column, Integer, String, Boolean, Numeric, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from motorent.database import Base


class ContractStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True)
    tax_id = Column(String, index=True, nullable=True)  # DNI / CUIT
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    contracts = relationship("RentalContract", back_populates="customer")
    memberships = relationship("CustomerGroupMember", back_populates="customer")


class RentalContract(Base):
    """
    Contrato de alquiler de moto. Para pricing solo interesa
    el estado, la fecha de inicio y el monto por período.
    """
    __tablename__ = "rental_contracts"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)

    status = Column(Enum(ContractStatus), default=ContractStatus.ACTIVE, nullable=False)
    start_date = Column(DateTime, nullable=False)
    period_amount = Column(Numeric(12, 2), default=0)  # Monto por período (semana/mes)

    customer = relationship("Customer", back_populates="contracts")


class CustomerGroup(Base):
    __tablename__ = "customer_groups"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    price_list_id = Column(Integer, ForeignKey("price_lists.id"), nullable=True)

    price_list = relationship("PriceList")
    members = relationship("CustomerGroupMember", back_populates="group", cascade="all, delete-orphan")


class CustomerGroupMember(Base):
    __tablename__ = "customer_group_members"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("customer_groups.id"), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)

    group = relationship("CustomerGroup", back_populates="members")
    customer = relationship("Customer", back_populates="memberships")
