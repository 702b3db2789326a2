from sqlalchemy import Column, String, Text, Integer, Date, DateTime, CheckConstraint
from sqlalchemy.sql import func
from app.core.database import Base
from app.models.enums import OrderStatus, meal_type_enum, order_status_enum
from app.utils.id_utils import generate_id

class Order(Base):
    """Customer order; user_name and dish_name are free text, not foreign keys"""
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint('people_count > 0', name='ck_orders_people_count_positive'),
    )

    id = Column(String, primary_key=True, default=generate_id)
    user_name = Column(String, nullable=False, index=True)
    order_date = Column(Date, nullable=False, index=True)
    meal_type = Column(meal_type_enum, nullable=False)
    dish_name = Column(String, nullable=False)
    people_count = Column(Integer, nullable=False)
    notes = Column(Text)
    status = Column(
        order_status_enum,
        nullable=False,
        default=OrderStatus.pending,
        index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Order(id={self.id}, user_name={self.user_name}, order_date={self.order_date}, status={self.status})>"
