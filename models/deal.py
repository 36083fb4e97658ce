from sqlalchemy import Column, String, Integer, Boolean, DateTime, CheckConstraint, Index

from models.base_model import BaseModel, Base


class Deal(BaseModel, Base):
    __tablename__ = "deals"

    title = Column(String(140), nullable=False)
    description = Column(String(600), nullable=False, default="")
    category = Column(String(60), nullable=False)
    price_bdt = Column(Integer, nullable=True)
    image_url = Column(String(600), nullable=False, default="")
    stock = Column(Integer, nullable=False, default=0)
    ends_at = Column(DateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_deals_stock_nonnegative"),
        CheckConstraint("(price_bdt IS NULL) OR (price_bdt >= 0)", name="ck_deals_price_nonnegative"),
        Index("ix_deals_ends_at", "ends_at"),
    )
