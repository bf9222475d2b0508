"""
Product Model
Trading status: available | sold
"""

import uuid
from datetime import datetime, timezone
from marketplace.extensions import db

PRODUCT_AVAILABLE = "available"
PRODUCT_SOLD = "sold"


class Product(db.Model):
    __tablename__ = "products"

    product_id = db.Column(
        db.UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    category = db.Column(db.String(100), nullable=False)
    seller_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey("users.user_id"), nullable=False)
    seller_image = db.Column(db.Text, nullable=False)
    images = db.Column(db.JSON, nullable=False, default=list)  # [{"url": ..., "alt": ...}]
    trading_status = db.Column(
        db.Enum(PRODUCT_AVAILABLE, PRODUCT_SOLD, name="trading_status"),
        nullable=False,
        default=PRODUCT_AVAILABLE
    )
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    seller = db.relationship("User", backref=db.backref("products", lazy=True))

    def to_dict(self):
        return {
            "product_id":     str(self.product_id),
            "name":           self.name,
            "description":    self.description,
            "price":          float(self.price),
            "category":       self.category,
            "seller_id":      str(self.seller_id),
            "seller_image":   self.seller_image,
            "images":         self.images or [],
            "trading_status": self.trading_status,
            "created_at":     self.created_at.isoformat(),
        }
