import uuid
from datetime import datetime, timezone

import bcrypt
from marketplace.extensions import db

DEFAULT_PROFILE_IMAGE = "https://i.pinimg.com/564x/fe/4f/61/fe4f610344c0da3e261f76fe0ae1cdd6.jpg"


class User(db.Model):
    __tablename__ = 'users'

    user_id = db.Column(db.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    age = db.Column(db.Integer, nullable=False)
    contact_number = db.Column(db.String(10), nullable=False)
    password_hash = db.Column(db.Text, nullable=False)
    profile_image = db.Column(db.Text, nullable=False, default=DEFAULT_PROFILE_IMAGE)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    cart_items = db.relationship(
        'CartItem',
        backref='user',
        cascade='all, delete-orphan',
        order_by='CartItem.added_at',
    )
    seller_reviews = db.relationship(
        'SellerReview',
        foreign_keys='SellerReview.seller_id',
        backref='seller',
        cascade='all, delete-orphan',
        order_by='SellerReview.created_at',
    )

    def set_password(self, password):
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    def to_public_dict(self):
        """Profile fields other users may see (buyer/seller cards)."""
        return {
            'user_id': str(self.user_id),
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'age': self.age,
            'contact_number': self.contact_number,
            'profile_image': self.profile_image,
        }

    def to_dict(self):
        data = self.to_public_dict()
        data['seller_reviews'] = [r.to_dict() for r in self.seller_reviews]
        data['cart_items'] = [item.to_dict() for item in self.cart_items]
        return data


class CartItem(db.Model):
    __tablename__ = 'cart_items'

    cart_item_id = db.Column(db.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey('users.user_id'), nullable=False)
    product_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey('products.product_id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    added_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    product = db.relationship('Product')

    __table_args__ = (
        db.UniqueConstraint('user_id', 'product_id', name='uq_cart_user_product'),
    )

    def to_dict(self):
        product = self.product
        return {
            'product': {
                'product_id': str(product.product_id),
                'name': product.name,
                'price': float(product.price),
                'description': product.description,
                'images': product.images or [],
                'trading_status': product.trading_status,
            },
            'quantity': self.quantity,
        }


class SellerReview(db.Model):
    __tablename__ = 'seller_reviews'

    review_id = db.Column(db.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    seller_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey('users.user_id'), nullable=False)
    reviewer_id = db.Column(db.UUID(as_uuid=True), db.ForeignKey('users.user_id'), nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    review = db.Column(db.Text, nullable=False)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    reviewer = db.relationship('User', foreign_keys=[reviewer_id])

    def to_dict(self):
        reviewer = self.reviewer
        return {
            'review_id': str(self.review_id),
            'rating': self.rating,
            'review': self.review,
            'reviewer': {
                'user_id': str(reviewer.user_id),
                'first_name': reviewer.first_name,
                'last_name': reviewer.last_name,
                'email': reviewer.email,
                'profile_image': reviewer.profile_image,
            },
            'created_at': self.created_at.isoformat(),
        }
