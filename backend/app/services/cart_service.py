"""
Cart Service
Server side of the shopping cart for signed-in users

The server stores only key/product/variant/quantity per line; every read
fills in name, price, image and category from the catalog so the totals
always use current prices.
"""
import logging
from typing import Optional

from app.domain.cart import Cart, CartLine, utcnow
from app.repositories.cart_repository import CartRepository
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CartError(Exception):
    """Cart operation rejected (unknown or unavailable product)"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CartService:
    """
    Service for the server copy of a cart

    Handles:
    - Loading the cart with catalog data
    - add / set-quantity / remove / clear
    - Merging the browser cart on sign-in (last write wins)
    """

    def __init__(self, cart_repo: Optional[CartRepository] = None,
                 product_repo: Optional[ProductRepository] = None):
        self.cart_repo = cart_repo or CartRepository()
        self.product_repo = product_repo or ProductRepository()

    def _load(self, user_id: str) -> Cart:
        return Cart(self.cart_repo.find_by_user(user_id))

    def hydrate(self, cart: Cart) -> Cart:
        """
        Fill display fields from the catalog

        Lines whose product was deleted or deactivated are left out.
        """
        product_ids = list({line.product_id for line in cart.lines})
        products = {p.id: p for p in self.product_repo.find_by_ids(product_ids)}

        hydrated = Cart()
        for line in cart.lines:
            product = products.get(line.product_id)
            if product is None or not product.is_active:
                logger.info(f"Dropping unavailable product {line.product_id} from cart view")
                continue
            hydrated.add(line.model_copy(update={
                'name': product.name,
                'price': product.price,
                'image': product.primary_image,
                'category': product.category,
            }))
        return hydrated

    def get_cart(self, user_id: str) -> Cart:
        return self.hydrate(self._load(user_id))

    def add_item(self, user_id: str, line: CartLine) -> Cart:
        """Add a line; quantities of an existing key add up"""
        product = self.product_repo.find_by_id(line.product_id)
        if product is None or not product.is_active:
            raise CartError(f"Product {line.product_id} is not available", status_code=404)

        cart = self._load(user_id)
        stored = cart.add(line.model_copy(update={'updated_at': utcnow()}))
        self.cart_repo.save_line(user_id, stored)
        logger.debug(f"Cart {user_id}: {stored.key} -> {stored.quantity}")
        return self.hydrate(cart)

    def set_quantity(self, user_id: str, key: str, quantity: int) -> Cart:
        """quantity <= 0 removes the line; unknown keys are ignored"""
        cart = self._load(user_id)
        if key not in cart:
            return self.hydrate(cart)

        line = cart.set_quantity(key, quantity)
        if line is None:
            self.cart_repo.delete_line(user_id, key)
        else:
            self.cart_repo.save_line(user_id, line)
        return self.hydrate(cart)

    def remove_item(self, user_id: str, key: str) -> Cart:
        cart = self._load(user_id)
        if cart.remove(key) is not None:
            self.cart_repo.delete_line(user_id, key)
        return self.hydrate(cart)

    def clear(self, user_id: str) -> None:
        removed = self.cart_repo.clear(user_id)
        logger.debug(f"Cart {user_id}: cleared {removed} line(s)")

    def merge(self, user_id: str, local: Cart) -> Cart:
        """
        Reconcile the browser cart with the server cart

        The merged result replaces the server copy and is returned with
        catalog data.
        """
        cart = self._load(user_id)
        cart.merge(local)
        self.cart_repo.replace(user_id, cart.lines)
        logger.info(f"Merged cart for {user_id}: {len(local)} local line(s), {len(cart)} after merge")
        return self.hydrate(cart)
