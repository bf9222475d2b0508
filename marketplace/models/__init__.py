from marketplace.models.user import User, CartItem, SellerReview
from marketplace.models.product import Product
from marketplace.models.order import Order, OrderLine

__all__ = ['User', 'CartItem', 'SellerReview', 'Product', 'Order', 'OrderLine']
