from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata

APPOINTMENT_STATUSES = ("scheduled", "completed", "cancelled", "pending")


class Staff(Base):
    __tablename__ = 'staff'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    email = Column(Text)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    availabilities = relationship(
        'StaffAvailability', back_populates='staff', order_by='StaffAvailability.day_of_week'
    )
    breaks = relationship('StaffBreaks', back_populates='staff')
    appointments = relationship('Appointments', back_populates='staff')


class Services(Base):
    __tablename__ = 'services'
    __table_args__ = (
        CheckConstraint('duration_minutes > 0'),
    )

    name = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    id = Column(Integer, primary_key=True)
    description = Column(Text)
    price = Column(Float)
    is_active = Column(Integer, nullable=False, server_default=text('1'))

    appointments = relationship('Appointments', back_populates='service')


class Customers(Base):
    __tablename__ = 'customers'

    first_name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    last_name = Column(Text)
    email = Column(Text)
    phone = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    appointments = relationship('Appointments', back_populates='customer')


class StaffAvailability(Base):
    """Weekly working hours: one row per staff member per enabled weekday."""

    __tablename__ = 'staff_availability'
    __table_args__ = (
        UniqueConstraint('staff_id', 'day_of_week'),
        CheckConstraint('day_of_week BETWEEN 0 AND 6'),
    )

    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    start_time = Column(Text, nullable=False)  # "HH:MM"
    end_time = Column(Text, nullable=False)  # "HH:MM"
    id = Column(Integer, primary_key=True)
    is_available = Column(Integer, nullable=False, server_default=text('1'))

    staff = relationship('Staff', back_populates='availabilities')


class StaffBreaks(Base):
    __tablename__ = 'staff_breaks'
    __table_args__ = (
        CheckConstraint('day_of_week BETWEEN 0 AND 6'),
    )

    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)

    staff = relationship('Staff', back_populates='breaks')


class Appointments(Base):
    __tablename__ = 'appointments'
    __table_args__ = (
        CheckConstraint('duration_minutes > 0'),
        Index('appointments_staff_date_idx', 'staff_id', 'date_start'),
    )

    customer_id = Column(ForeignKey('customers.id', ondelete='CASCADE'), nullable=False)
    service_id = Column(ForeignKey('services.id', ondelete='CASCADE'), nullable=False)
    date_start = Column(DateTime, nullable=False)
    date_end = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'scheduled'"))
    id = Column(Integer, primary_key=True)
    staff_id = Column(ForeignKey('staff.id', ondelete='SET NULL'))  # NULL = unassigned
    notes = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    staff = relationship('Staff', back_populates='appointments')
    service = relationship('Services', back_populates='appointments')
    customer = relationship('Customers', back_populates='appointments')
