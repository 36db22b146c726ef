"""Order orchestration: create, cancel and move orders through their lifecycle.

Each public operation is one unit of work. Stock is taken with a conditional
decrement so two counters selling the last unit cannot both succeed.
"""

import uuid
from collections import defaultdict
from typing import Optional, Union

from libs.common.currency import format_inr, rupees_to_paise
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.pos_service import repository
from services.pos_service.config import PosConfig
from services.pos_service.errors import (
    AlreadyCancelled,
    CannotCancelCompleted,
    InsufficientStock,
    InvalidStatusTransition,
    OrderNotFound,
    ProductNotFound,
    ValidationError,
)
from services.pos_service.loyalty import points_for_amount
from services.pos_service.models import (
    TERMINAL_ORDER_STATUSES,
    Inventory,
    InventoryAction,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    TaxKind,
)
from services.pos_service.order_totals import calculate_line, calculate_order_totals
from services.pos_service.schemas import OrderCreate
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

WALK_IN_CUSTOMER_NAME = "Walk-in Customer"

# Statuses a caller may request explicitly
SETTABLE_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.PROCESSING,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    }
)

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PROCESSING,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
}


class OrderOrchestrator:
    """Coordinates validation, pricing and persistence for orders."""

    def __init__(self, config: Optional[PosConfig] = None):
        self.config = config or PosConfig.from_settings()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_order(
        self,
        db: AsyncSession,
        *,
        shop_id: uuid.UUID,
        cart: OrderCreate,
        cashier_id: Optional[str] = None,
    ) -> Order:
        """Validate the cart, price it and persist the order in one transaction.

        Raises ``ProductNotFound``, ``InsufficientStock`` or ``ValidationError``
        with nothing written; store failures surface as ``TransactionFailure``.
        """
        async with repository.unit_of_work(db):
            shop = await repository.get_shop(db, shop_id)
            if shop is None or not shop.is_active:
                raise ValidationError(f"Shop {shop_id} not found", field="shop_id")

            customer = None
            if cart.customer_id is not None:
                customer = await repository.get_customer(db, cart.customer_id, shop_id)
                if customer is None:
                    raise ValidationError(
                        f"Customer {cart.customer_id} not found", field="customer_id"
                    )

            if cart.is_delivery and not (cart.delivery_address or "").strip():
                raise ValidationError(
                    "Delivery orders need a delivery address", field="delivery_address"
                )

            # 1. Products must belong to the shop
            products = {}
            for line in cart.items:
                if line.product_id in products:
                    continue
                product = await repository.find_product_by_id_and_shop(
                    db, line.product_id, shop_id
                )
                if product is None or not product.is_active:
                    raise ProductNotFound(line.product_id)
                products[line.product_id] = product

            # 2. Fast-fail stock check, per product across the whole cart
            requested = defaultdict(int)
            for line in cart.items:
                requested[line.product_id] += line.quantity
            for product_id, quantity in requested.items():
                available = await repository.sum_inventory_quantity(
                    db, product_id, shop_id
                )
                if available < quantity:
                    raise InsufficientStock(
                        product_id,
                        available=available,
                        requested=quantity,
                        product_name=products[product_id].name,
                    )

            # 3. Price every line
            place_of_supply = (cart.place_of_supply or "").strip() or shop.state
            priced = []
            for line in cart.items:
                product = products[line.product_id]
                unit_price = (
                    rupees_to_paise(line.unit_price)
                    if line.unit_price is not None
                    else product.selling_price_paise
                )
                priced.append(
                    calculate_line(
                        quantity=line.quantity,
                        unit_price=unit_price,
                        discount_amount=rupees_to_paise(line.discount_amount),
                        gst_rate=product.gst_rate,
                        source_state=shop.state,
                        target_state=place_of_supply,
                    )
                )

            # 4. Order-level discount
            order_discount = rupees_to_paise(cart.discount_amount)
            totals = calculate_order_totals(priced, additional_discount=order_discount)
            points = points_for_amount(totals.final_amount, self.config) if customer else 0

            # 5-6. Persist order and items
            order = Order(
                order_number=Order.generate_order_number(self.config.order_number_prefix),
                shop_id=shop_id,
                cashier_id=cashier_id,
                customer_id=customer.id if customer else None,
                customer_name=(
                    cart.customer_name
                    or (customer.name if customer else WALK_IN_CUSTOMER_NAME)
                ),
                customer_phone=cart.customer_phone
                or (customer.phone if customer else None),
                subtotal_paise=totals.subtotal,
                discount_amount_paise=order_discount,
                tax_amount_paise=totals.total_tax,
                cgst_amount_paise=sum(p.tax_for(TaxKind.CGST) for p in priced),
                sgst_amount_paise=sum(p.tax_for(TaxKind.SGST) for p in priced),
                igst_amount_paise=sum(p.tax_for(TaxKind.IGST) for p in priced),
                total_amount_paise=totals.final_amount,
                loyalty_points_awarded=points,
                place_of_supply=place_of_supply,
                status=OrderStatus.PENDING,
                payment_method=cart.payment_method,
                payment_status=PaymentStatus.PENDING,
                is_delivery=cart.is_delivery,
                delivery_address=cart.delivery_address,
                notes=cart.notes,
            )
            items = [
                OrderItem(
                    product_id=line.product_id,
                    line_number=number,
                    product_name=products[line.product_id].name,
                    hsn_code=products[line.product_id].hsn_code,
                    gst_rate=int(products[line.product_id].gst_rate),
                    quantity=amounts.quantity,
                    unit_price_paise=amounts.unit_price,
                    discount_amount_paise=amounts.discount_amount,
                    tax_amount_paise=amounts.tax_amount,
                    total_price_paise=amounts.total_price,
                )
                for number, (line, amounts) in enumerate(
                    zip(cart.items, priced), start=1
                )
            ]
            await repository.create_order_with_items(db, order, items)

            # 7. Take stock; the guard on the update is authoritative
            for item in items:
                await self._take_stock(db, order, item, cashier_id)

            # 8. Loyalty and lifetime spend
            if customer is not None:
                await repository.increment_customer_loyalty(
                    db, customer.id, points, totals.final_amount
                )

        # 9. Committed; hand back a fully populated order
        order = await repository.load_order(db, order.id, shop_id)

        logger.info(
            "Created order %s for shop %s: %d items, total %s",
            order.order_number,
            shop_id,
            len(order.items),
            format_inr(order.total_amount_paise),
            extra={"shop_id": shop_id, "order_number": order.order_number},
        )
        return order

    async def _take_stock(
        self,
        db: AsyncSession,
        order: Order,
        item: OrderItem,
        cashier_id: Optional[str],
    ) -> None:
        changed = await repository.conditional_decrement_inventory(
            db, item.product_id, order.shop_id, item.quantity
        )
        if not changed:
            available = await repository.sum_inventory_quantity(
                db, item.product_id, order.shop_id
            )
            raise InsufficientStock(
                item.product_id,
                available=available,
                requested=item.quantity,
                product_name=item.product_name,
            )

        inventory = await repository.get_inventory(db, item.product_id, order.shop_id)
        await repository.write_inventory_audit(
            db,
            inventory=inventory,
            action=InventoryAction.SALE,
            old_quantity=inventory.quantity + item.quantity,
            new_quantity=inventory.quantity,
            performed_by=cashier_id,
            reference_type="order",
            reference_id=order.id,
        )

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    async def cancel_order(
        self,
        db: AsyncSession,
        *,
        order_id: uuid.UUID,
        shop_id: uuid.UUID,
        reason: Optional[str] = None,
        performed_by: Optional[str] = None,
    ) -> Order:
        """Cancel an open order, returning its stock and reversing loyalty."""
        async with repository.unit_of_work(db):
            order = await repository.load_order(db, order_id, shop_id)
            if order is None:
                raise OrderNotFound(order_id)
            if order.status == OrderStatus.CANCELLED:
                raise AlreadyCancelled(order_id)
            if order.status == OrderStatus.COMPLETED:
                raise CannotCancelCompleted(order_id)
            if order.status in TERMINAL_ORDER_STATUSES:
                raise InvalidStatusTransition(
                    order_id, order.status.value, OrderStatus.CANCELLED.value
                )

            for item in order.items:
                await self._return_stock(db, order, item, performed_by)

            if order.customer_id is not None:
                await repository.decrement_customer_loyalty(
                    db,
                    order.customer_id,
                    order.loyalty_points_awarded,
                    order.total_amount_paise,
                )

            order.status = OrderStatus.CANCELLED
            order.cancelled_at = utc_now()
            if reason:
                note = f"Cancelled: {reason}"
                order.notes = f"{order.notes}\n{note}" if order.notes else note

        order = await repository.load_order(db, order_id, shop_id)

        logger.info(
            "Cancelled order %s for shop %s (reason=%s)",
            order.order_number,
            shop_id,
            reason,
            extra={
                "shop_id": shop_id,
                "order_number": order.order_number,
                "performed_by": performed_by,
            },
        )
        return order

    async def _return_stock(
        self,
        db: AsyncSession,
        order: Order,
        item: OrderItem,
        performed_by: Optional[str],
    ) -> None:
        changed = await repository.increment_inventory(
            db, item.product_id, order.shop_id, item.quantity
        )
        if changed:
            inventory = await repository.get_inventory(
                db, item.product_id, order.shop_id
            )
        else:
            # Stock row was removed since the sale; recreate it
            inventory = Inventory(
                product_id=item.product_id,
                shop_id=order.shop_id,
                quantity=item.quantity,
                min_stock_level=self.config.default_min_stock_level,
                max_stock_level=self.config.default_max_stock_level,
            )
            db.add(inventory)
            await db.flush()

        await repository.write_inventory_audit(
            db,
            inventory=inventory,
            action=InventoryAction.RETURN,
            old_quantity=inventory.quantity - item.quantity,
            new_quantity=inventory.quantity,
            performed_by=performed_by,
            reference_type="order",
            reference_id=order.id,
            notes=f"Returned from cancelled order {order.order_number}",
        )

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    async def update_status(
        self,
        db: AsyncSession,
        *,
        order_id: uuid.UUID,
        shop_id: uuid.UUID,
        new_status: Union[OrderStatus, str],
        performed_by: Optional[str] = None,
    ) -> Order:
        """Move an order forward; ``cancelled`` goes through ``cancel_order``."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError(
                f"Unknown order status {new_status!r}", field="status"
            ) from None
        if target not in SETTABLE_STATUSES:
            raise ValidationError(
                f"Order status cannot be set to {target.value}", field="status"
            )

        if target == OrderStatus.CANCELLED:
            return await self.cancel_order(
                db, order_id=order_id, shop_id=shop_id, performed_by=performed_by
            )

        async with repository.unit_of_work(db):
            order = await repository.load_order(db, order_id, shop_id)
            if order is None:
                raise OrderNotFound(order_id)
            if order.status == target:
                return order
            if target not in ALLOWED_TRANSITIONS.get(order.status, ()):
                raise InvalidStatusTransition(order_id, order.status.value, target.value)

            previous = order.status
            order.status = target
            if target == OrderStatus.COMPLETED:
                order.completed_at = utc_now()

        order = await repository.load_order(db, order_id, shop_id)

        logger.info(
            "Order %s moved from %s to %s",
            order.order_number,
            previous.value,
            target.value,
            extra={"shop_id": shop_id, "order_number": order.order_number},
        )
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_order(
        self, db: AsyncSession, order_id: uuid.UUID, shop_id: uuid.UUID
    ) -> Order:
        order = await repository.load_order(db, order_id, shop_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    async def list_orders(
        self,
        db: AsyncSession,
        shop_id: uuid.UUID,
        status: Optional[OrderStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Order], int]:
        """Newest-first page of a shop's orders plus the total match count."""
        query = select(Order).where(Order.shop_id == shop_id)
        if status is not None:
            query = query.where(Order.status == status)
        if payment_status is not None:
            query = query.where(Order.payment_status == payment_status)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Order.order_number.ilike(pattern),
                    Order.customer_name.ilike(pattern),
                    Order.customer_phone.ilike(pattern),
                )
            )

        total = (
            await db.execute(select(func.count()).select_from(query.subquery()))
        ).scalar_one()

        result = await db.execute(
            query.options(selectinload(Order.items), selectinload(Order.customer))
            .order_by(Order.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), total
