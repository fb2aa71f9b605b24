"""Django-backed gateway used by the cart reconciler."""

from asgiref.sync import sync_to_async
from django.contrib.auth import get_user_model

from .reconciliation import CartGateway
from .selectors import cart_items_as_payload, load_active_cart
from .services import replace_cart_items


class DjangoCartGateway(CartGateway):
    """Reads and replaces the active cart through the ORM.

    ORM access runs in a worker thread via `sync_to_async`, so the gateway
    can be awaited from the reconciler's event loop.
    """

    def _user(self, user_id):
        return get_user_model().objects.get(pk=user_id)

    def _load(self, user_id) -> list[dict]:
        return cart_items_as_payload(cart=load_active_cart(user=self._user(user_id)))

    def _save(self, user_id, items: list[dict]) -> None:
        replace_cart_items(user=self._user(user_id), items=items)

    async def load_items(self, user_id) -> list[dict]:
        return await sync_to_async(self._load)(user_id)

    async def save_items(self, user_id, items: list[dict]) -> None:
        await sync_to_async(self._save)(user_id, items)
