from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, Integer, Boolean, Text, DateTime, false


"""
___________________________________________________

1.  Product Review Table
___________________________________________________

"""
class ProductReview(SQLModel, table=True):
    __tablename__ = "product_reviews"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True)
    )
    header: str = Field(sa_column=Column(Text, nullable=False))
    content: str = Field(sa_column=Column(Text, nullable=False))
    date: datetime = Field(sa_column=Column(DateTime, nullable=False, default=datetime.now))
    product_id: int = Field(sa_column=Column(Integer, nullable=False, index=True))
    is_hidden: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False, server_default=false())
    )

    def __repr__(self):
        return f"<ProductReview {self.id} for product {self.product_id}>"
