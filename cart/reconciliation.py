"""Client-side cart state and guest/user cart reconciliation.

The storefront client keeps a local cart while the visitor is anonymous.
This module holds:

- `merge_carts`: pure union of a server cart and a guest cart, summing
  shared products and clamping every line to its stock ceiling.
- `CartStore` with `cart_reducer`: synchronous local mutations.
- `CartReconciler`: an asyncio task consuming identity events. When an
  identity is established it merges the guest cart into the server cart
  exactly once and loads the result into the store. Local changes
  are mirrored to guest storage while anonymous and to the server cart
  once signed in.

Items travel in the `{product, quantity}` wire shape used by the cart API.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from catalog.snapshots import ProductSnapshot, build_snapshot
from common.normalize import parse_opaque_json, to_non_negative_int

logger = logging.getLogger("storefront.cart")

GUEST = "guest"

StockLookup = Callable[[str], Optional[int]]


def _product_of(entry: Mapping[str, Any]) -> dict:
    return parse_opaque_json(entry.get("product")) or {}


def _stock_ceiling(product: dict, stock_of: Optional[StockLookup]) -> Optional[int]:
    if stock_of is not None:
        stock = stock_of(str(product.get("id")))
        if stock is not None:
            return stock
    if product.get("stock") is None:
        return None
    return to_non_negative_int(product.get("stock"))


def merge_carts(
    server_items: Iterable[Mapping[str, Any]],
    local_items: Iterable[Mapping[str, Any]],
    *,
    stock_of: Optional[StockLookup] = None,
) -> list[dict]:
    """Union two item lists keyed by product id.

    Shared products get their quantities summed; every line is clamped to
    its stock ceiling (`stock_of(product_id)` when it knows the product,
    otherwise the snapshot's `stock`, otherwise unbounded). Lines left with
    no quantity are dropped. Server lines keep their order, new local lines
    follow.
    """

    merged: dict[str, dict] = {}
    for entry in list(server_items or []) + list(local_items or []):
        if not isinstance(entry, Mapping):
            continue
        product = _product_of(entry)
        product_id = str(product.get("id") or entry.get("productId") or "")
        quantity = to_non_negative_int(entry.get("quantity"))
        if not product_id or quantity <= 0:
            continue
        if product_id in merged:
            merged[product_id]["quantity"] += quantity
        else:
            merged[product_id] = {"product": {**product, "id": product_id}, "quantity": quantity}

    result = []
    for item in merged.values():
        ceiling = _stock_ceiling(item["product"], stock_of)
        if ceiling is not None:
            item["quantity"] = min(item["quantity"], ceiling)
        if item["quantity"] > 0:
            result.append(item)
    return result


# Local state


@dataclass(frozen=True)
class CartEntry:
    product: ProductSnapshot
    quantity: int

    def as_item(self) -> dict:
        return {"product": self.product.as_json(), "quantity": self.quantity}


@dataclass(frozen=True)
class CartState:
    items: tuple[CartEntry, ...] = ()

    @property
    def total_items(self) -> int:
        return sum(entry.quantity for entry in self.items)

    @property
    def subtotal(self) -> int:
        return sum(entry.product.price * entry.quantity for entry in self.items)

    def as_items(self) -> list[dict]:
        return [entry.as_item() for entry in self.items]

    @classmethod
    def from_items(cls, items: Iterable[Mapping[str, Any]]) -> "CartState":
        entries = []
        for entry in items or []:
            if not isinstance(entry, Mapping):
                continue
            quantity = max(1, to_non_negative_int(entry.get("quantity"), 1))
            entries.append(CartEntry(product=build_snapshot(entry.get("product")), quantity=quantity))
        return cls(items=tuple(entries))


@dataclass(frozen=True)
class AddItem:
    product: ProductSnapshot
    quantity: int = 1


@dataclass(frozen=True)
class RemoveItem:
    product_id: str


@dataclass(frozen=True)
class UpdateQuantity:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class ClearCart:
    pass


@dataclass(frozen=True)
class LoadCart:
    state: CartState


CartAction = Union[AddItem, RemoveItem, UpdateQuantity, ClearCart, LoadCart]


def _clamp(quantity: int, stock: Optional[int]) -> int:
    return quantity if stock is None else min(quantity, stock)


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    """Apply a local cart mutation and return the new state."""

    if isinstance(action, AddItem):
        product = action.product
        if any(entry.product.id == product.id for entry in state.items):
            items = tuple(
                replace(entry, quantity=_clamp(entry.quantity + action.quantity, product.stock))
                if entry.product.id == product.id
                else entry
                for entry in state.items
            )
        else:
            items = state.items + (CartEntry(product=product, quantity=_clamp(action.quantity, product.stock)),)
        return replace(state, items=items)
    if isinstance(action, RemoveItem):
        return replace(state, items=tuple(e for e in state.items if e.product.id != action.product_id))
    if isinstance(action, UpdateQuantity):
        return replace(
            state,
            items=tuple(
                replace(entry, quantity=_clamp(max(action.quantity, 1), entry.product.stock))
                if entry.product.id == action.product_id
                else entry
                for entry in state.items
            ),
        )
    if isinstance(action, ClearCart):
        return replace(state, items=())
    if isinstance(action, LoadCart):
        return action.state
    return state


class CartStore:
    """Holds the local cart state and notifies subscribers of changes."""

    def __init__(self, state: Optional[CartState] = None):
        self.state = state or CartState()
        self._listeners: list[Callable[[CartState, CartAction], None]] = []

    def dispatch(self, action: CartAction) -> CartState:
        self.state = cart_reducer(self.state, action)
        for listener in list(self._listeners):
            listener(self.state, action)
        return self.state

    def subscribe(self, listener: Callable[[CartState, CartAction], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


# Reconciliation


class CartGateway(ABC):
    """Server-side cart persistence for an authenticated identity."""

    @abstractmethod
    async def load_items(self, user_id: Any) -> list[dict]:
        """Return the user's active cart items."""
        ...

    @abstractmethod
    async def save_items(self, user_id: Any, items: list[dict]) -> None:
        """Replace the user's active cart items."""
        ...


class GuestCartStorage(ABC):
    """Client-local storage for the anonymous cart."""

    @abstractmethod
    def load(self) -> list[dict]: ...

    @abstractmethod
    def save(self, items: list[dict]) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


@dataclass(frozen=True)
class IdentityChanged:
    """Identity state published by the auth layer.

    `user_id` is None for an anonymous visitor. `resolved` is False while
    the session is still being checked.
    """

    user_id: Any = None
    resolved: bool = True

    @property
    def identity(self) -> str:
        return GUEST if self.user_id is None else str(self.user_id)


@dataclass
class CartReconciler:
    """Reconcile the local cart whenever the resolved identity changes."""

    store: CartStore
    gateway: CartGateway
    guest_storage: GuestCartStorage
    events: asyncio.Queue = field(default_factory=asyncio.Queue)
    last_identity: Optional[str] = None

    def __post_init__(self):
        self._user_id: Any = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: set[asyncio.Task] = set()
        self._save_lock = asyncio.Lock()
        self.store.subscribe(self._persist)

    def publish(self, event: Optional[IdentityChanged]) -> None:
        """Queue an identity event; None stops `run()`."""
        self.events.put_nowait(event)

    async def run(self) -> None:
        while True:
            event = await self.events.get()
            try:
                if event is None:
                    await self.flush()
                    return
                await self.handle(event)
            finally:
                self.events.task_done()

    async def flush(self) -> None:
        """Wait for every scheduled server save to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _persist(self, state: CartState, action: CartAction) -> None:
        # LoadCart comes from reconciliation itself and is already persisted.
        if isinstance(action, LoadCart) or self.last_identity is None:
            return
        items = state.as_items()
        if self.last_identity == GUEST:
            self.guest_storage.save(items)
            return
        if self._loop is None or self._loop.is_closed():
            logger.warning("cart.sync_skipped", extra={"event": "cart.sync_skipped", "user_id": self._user_id})
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._schedule(self._user_id, items)
        else:
            self._loop.call_soon_threadsafe(self._schedule, self._user_id, items)

    def _schedule(self, user_id: Any, items: list[dict]) -> None:
        task = self._loop.create_task(self._save_remote(user_id, items))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save_remote(self, user_id: Any, items: list[dict]) -> None:
        # Saves run in dispatch order so the last local state wins.
        async with self._save_lock:
            try:
                await self.gateway.save_items(user_id, items)
            except Exception:
                logger.exception("cart.sync_failed", extra={"event": "cart.sync_failed", "user_id": user_id})

    async def handle(self, event: IdentityChanged) -> Optional[CartState]:
        self._loop = asyncio.get_running_loop()
        if not event.resolved:
            logger.debug("cart.reconcile_skipped", extra={"event": "cart.reconcile_skipped", "reason": "unresolved"})
            return None
        identity = event.identity
        if identity == self.last_identity:
            return None

        try:
            if event.user_id is None:
                items = merge_carts([], self.guest_storage.load())
            else:
                guest_items = merge_carts([], self.guest_storage.load())
                persisted = await self.gateway.load_items(event.user_id)
                items = merge_carts(persisted, guest_items)
                if guest_items:
                    await self.gateway.save_items(event.user_id, items)
                    self.guest_storage.clear()
                    logger.info(
                        "cart.guest_merged",
                        extra={
                            "event": "cart.guest_merged",
                            "user_id": event.user_id,
                            "guest_items": len(guest_items),
                            "merged_items": len(items),
                        },
                    )
        except Exception:
            logger.exception("cart.reconcile_failed", extra={"event": "cart.reconcile_failed", "identity": identity})
            items = []

        self.last_identity = identity
        self._user_id = event.user_id
        state = CartState.from_items(items)
        self.store.dispatch(LoadCart(state=state))
        return state
