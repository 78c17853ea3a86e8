from models.users import User
from models.products import Product
from models.inventory import Inventory
from models.inventory_changes import InventoryChange
from models.cart_items import CartItem
from models.promotions import Promotion
from models.orders import Order
from models.order_items import OrderItem
from models.payments import Payment
from models.bills import Bill

__all__ = [
    "User", "Product", "Inventory", "InventoryChange", "CartItem",
    "Promotion", "Order", "OrderItem", "Payment", "Bill",
]
