"""Product and Rating value objects.

Products are fetched from the backend and never mutated: a new fetch replaces
them wholesale. ``is_favorite`` is client-local and is never sent upstream.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Integer, String, Text, ValueObject

from storefront.domain import storefront


@storefront.value_object
class Rating:
    """Aggregate customer rating of a product."""

    rate = Float(default=0.0, min_value=0.0, max_value=5.0)
    count = Integer(default=0, min_value=0)


@storefront.value_object
class Product:
    """A catalog product as served by the backend."""

    product_id = Integer(required=True)
    title = String(required=True, max_length=500)
    price = Float(required=True, min_value=0.0)
    description = Text()
    category = String(max_length=255)
    image = String(max_length=1000)  # Not validated; rendering concern only
    rating = ValueObject(Rating)
    is_favorite = Boolean(default=False)

    @invariant.post
    def product_id_must_be_positive(self):
        if self.product_id is not None and self.product_id < 1:
            raise ValidationError({"product_id": ["Product id must be a positive integer"]})


def with_favorite(product: Product, is_favorite: bool) -> Product:
    """Return a copy of ``product`` with the favorite flag set."""
    return Product(
        product_id=product.product_id,
        title=product.title,
        price=product.price,
        description=product.description,
        category=product.category,
        image=product.image,
        rating=product.rating,
        is_favorite=is_favorite,
    )
