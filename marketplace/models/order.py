"""
Order Model
An order owns its lines; each line tracks the handoff of one product.
Line status: in process -> completed
"""

import uuid
from datetime import datetime, timezone
from marketplace.extensions import db

LINE_IN_PROCESS = "in process"
LINE_COMPLETED = "completed"


class Order(db.Model):
    __tablename__ = "orders"

    order_id = db.Column(
        db.UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    buyer_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey("users.user_id"), nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    buyer = db.relationship("User")
    lines = db.relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.position",
    )

    def to_dict(self):
        return {
            "order_id":   str(self.order_id),
            "buyer_id":   str(self.buyer_id),
            "created_at": self.created_at.isoformat(),
            "lines":      [line.to_dict() for line in self.lines],
        }


class OrderLine(db.Model):
    __tablename__ = "order_lines"

    line_id = db.Column(
        db.UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    order_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey("orders.order_id"), nullable=False)
    position = db.Column(db.Integer, nullable=False)
    product_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey("products.product_id"), nullable=False)
    otp_digest = db.Column(db.String(64), nullable=False)  # sha256 hex, never the raw code
    status = db.Column(
        db.Enum(LINE_IN_PROCESS, LINE_COMPLETED, name="order_line_status"),
        nullable=False,
        default=LINE_IN_PROCESS
    )
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    order = db.relationship("Order", back_populates="lines")
    product = db.relationship("Product")

    def to_dict(self):
        # otp_digest stays server-side
        return {
            "line_id":      str(self.line_id),
            "order_id":     str(self.order_id),
            "product_id":   str(self.product_id),
            "status":       self.status,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
