"""Order aggregate with OrderItem entity, Address and PaymentMethod value objects.

An Order is a frozen snapshot of a cart taken at checkout: item prices,
addresses and payment details never change after creation. Only ``status``
moves, and only through the transitions allowed by ``order.status``. The
total always equals subtotal plus tax plus shipping, to the cent.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.order.events import OrderCreated, OrderPlaced, OrderStatusChanged
from storefront.order.status import OrderStatus, parse_status, transition
from storefront.shared.pricing import DEFAULT_SHIPPING_COST

TOTAL_TOLERANCE = 0.005


class PaymentType(Enum):
    CREDIT_CARD = "Credit_Card"
    PAYPAL = "PayPal"
    APPLE_PAY = "Apple_Pay"
    GOOGLE_PAY = "Google_Pay"


_PAYMENT_TYPE_DISPLAY_NAMES = {
    PaymentType.CREDIT_CARD: "Credit Card",
    PaymentType.PAYPAL: "PayPal",
    PaymentType.APPLE_PAY: "Apple Pay",
    PaymentType.GOOGLE_PAY: "Google Pay",
}


def payment_type_display_name(payment_type: PaymentType) -> str:
    return _PAYMENT_TYPE_DISPLAY_NAMES[payment_type]


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object
class Address:
    """A shipping or billing address as entered at checkout.

    Fields may be blank; completeness is judged by ``validate_address`` rather
    than enforced on construction, so a half-filled form can still be held.
    """

    first_name = String(max_length=100, default="")
    last_name = String(max_length=100, default="")
    address_line1 = String(max_length=255, default="")
    address_line2 = String(max_length=255, default="")
    city = String(max_length=100, default="")
    state = String(max_length=100, default="")
    zip_code = String(max_length=20, default="")
    country = String(max_length=100, default="United States")
    phone_number = String(max_length=30, default="")


@storefront.value_object
class PaymentMethod:
    """Payment details captured at checkout. Only validated here, never charged."""

    payment_type = String(choices=PaymentType, default=PaymentType.CREDIT_CARD.value)
    card_number = String(default="")
    expiry_month = Integer(default=0)
    expiry_year = Integer(default=0)
    cvv = String(default="")
    card_holder_name = String(max_length=255, default="")
    billing_address = ValueObject(Address)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A cart line frozen at order time; later catalog price changes do not affect it."""

    product_id = Integer(required=True)
    product_name = String(required=True, max_length=500)
    product_image = String(max_length=1000)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    selected_size = String(max_length=50)
    selected_color = String(max_length=50)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    remote_id = String(max_length=255)  # Assigned by the backend on placement
    user_id = Integer(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(Address, required=True)
    payment_method = ValueObject(PaymentMethod, required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    shipping_cost = Float(default=DEFAULT_SHIPPING_COST)
    total = Float(default=0.0)
    created_at = DateTime()
    placed_at = DateTime()
    estimated_delivery = DateTime()

    @invariant.post
    def total_must_add_up(self):
        expected = (self.subtotal or 0.0) + (self.tax or 0.0) + (self.shipping_cost or 0.0)
        if abs((self.total or 0.0) - expected) >= TOTAL_TOLERANCE:
            raise ValidationError(
                {"total": [f"Total {self.total} does not match subtotal, tax and shipping ({expected})"]}
            )

    @classmethod
    def create(
        cls,
        user_id,
        items_data,
        shipping_address,
        payment_method,
        subtotal,
        tax,
        shipping_cost,
        total,
    ):
        """Create a PENDING order.

        Args:
            user_id: The user the order belongs to.
            items_data: List of dicts with product_id, product_name,
                        product_image, unit_price, quantity and optional
                        selected_size/selected_color.
            shipping_address: ``Address`` value object.
            payment_method: ``PaymentMethod`` value object.
            subtotal, tax, shipping_cost, total: Pricing computed by the caller.
        """
        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            shipping_address=shipping_address,
            payment_method=payment_method,
            status=OrderStatus.PENDING.value,
            subtotal=subtotal,
            tax=tax,
            shipping_cost=shipping_cost,
            total=total,
            created_at=now,
        )
        for data in items_data:
            order.add_items(OrderItem(**data))

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                user_id=user_id,
                item_count=len(items_data),
                subtotal=subtotal,
                tax=tax,
                shipping_cost=shipping_cost,
                total=total,
                created_at=now,
            )
        )
        return order

    @property
    def is_placed(self) -> bool:
        return bool(self.remote_id)

    # -------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------
    def record_placement(self, remote_id, estimated_delivery=None):
        """Record the backend's acceptance of the order. Allowed once."""
        if self.is_placed:
            raise ValidationError({"remote_id": [f"Order was already placed as {self.remote_id}"]})
        if not remote_id:
            raise ValidationError({"remote_id": ["Backend did not assign an order id"]})

        now = datetime.now(UTC)
        self.remote_id = str(remote_id)
        self.estimated_delivery = estimated_delivery
        self.placed_at = now

        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                remote_id=self.remote_id,
                estimated_delivery=estimated_delivery,
                placed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def transition_to(self, target):
        """Move to ``target`` status; raises ``IllegalStatusTransition`` and leaves status unchanged otherwise."""
        current = OrderStatus(self.status)
        target = transition(current, parse_status(target))

        self.status = target.value
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=datetime.now(UTC),
            )
        )

    def confirm(self):
        self.transition_to(OrderStatus.CONFIRMED)

    def start_processing(self):
        self.transition_to(OrderStatus.PROCESSING)

    def ship(self):
        self.transition_to(OrderStatus.SHIPPED)

    def deliver(self):
        self.transition_to(OrderStatus.DELIVERED)

    def cancel(self):
        self.transition_to(OrderStatus.CANCELLED)
