from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from medtrack.core.errors import InvalidTransition, Unauthorized
from medtrack.models.enums import OrderStatus, OrderType, Role
from medtrack.schemas.snapshot import InventoryItem, OrderRecord
from medtrack.services import access_policy, alert_engine, order_workflow

roles = st.frozensets(st.sampled_from(list(Role)))
statuses = st.sampled_from(list(OrderStatus))


def _item(quantity, reorder_level, expiry, price="1.00"):
    return InventoryItem(
        id="m",
        name="Medicine",
        batch_number="B",
        expiry_date=expiry,
        quantity_on_hand=quantity,
        unit_price=Decimal(price),
        reorder_level=reorder_level,
    )


@given(user_roles=roles, required=roles)
def test_can_access_is_set_intersection(user_roles, required):
    expected = not required or bool(user_roles & required)
    assert access_policy.can_access(user_roles, required) is expected


@given(user_roles=roles)
def test_navigation_is_filtered_subsequence(user_roles):
    visible = access_policy.visible_navigation(user_roles)
    assert all(access_policy.can_access(user_roles, item.required_roles) for item in visible)
    positions = [access_policy.NAVIGATION.index(item) for item in visible]
    assert positions == sorted(positions)


@given(current=statuses, target=statuses, user_roles=roles)
def test_transition_outcomes(current, target, user_roles):
    if Role.ADMIN not in user_roles:
        try:
            order_workflow.validate_transition(current, target, user_roles)
        except Unauthorized:
            return
        raise AssertionError("non-admin transition accepted")
    if target in order_workflow.ALLOWED_TRANSITIONS[current]:
        assert order_workflow.validate_transition(current, target, user_roles) == target
    else:
        try:
            order_workflow.validate_transition(current, target, user_roles)
        except InvalidTransition:
            return
        raise AssertionError("transition outside the table accepted")


@given(
    quantity=st.integers(min_value=0, max_value=10_000),
    reorder_level=st.integers(min_value=0, max_value=10_000),
    offset=st.integers(min_value=-400, max_value=400),
    hour=st.integers(min_value=0, max_value=23),
)
@settings(max_examples=200)
def test_item_predicates_agree(quantity, reorder_level, offset, hour):
    now = datetime(2025, 6, 15, hour, tzinfo=timezone.utc)
    item = _item(quantity, reorder_level, date(2025, 6, 15) + timedelta(days=offset))

    assert alert_engine.is_low_stock(item) is (quantity <= reorder_level)
    assert alert_engine.days_until_expiry(item, now) == offset
    assert alert_engine.is_expired(item, now) is (offset <= 0)
    assert alert_engine.is_expiring_soon(item, now) is (offset <= 30)
    if alert_engine.is_expired(item, now):
        assert alert_engine.is_expiring_soon(item, now)


@given(st.lists(st.integers(min_value=0, max_value=5), max_size=12), st.integers(min_value=0, max_value=15))
def test_recent_orders_sorted_and_bounded(offsets, limit):
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    orders = [
        OrderRecord(
            id=f"o{i}",
            order_type=OrderType.ISSUE,
            status=OrderStatus.PENDING,
            total_amount=Decimal("0"),
            created_by="u",
            created_at=base + timedelta(hours=h),
        )
        for i, h in enumerate(offsets)
    ]
    recent = alert_engine.recent_orders(orders, limit)

    assert len(recent) == min(limit, len(orders))
    stamps = [o.created_at for o in recent]
    assert stamps == sorted(stamps, reverse=True)
    for earlier, later in zip(recent, recent[1:]):
        if earlier.created_at == later.created_at:
            assert int(earlier.id[1:]) < int(later.id[1:])
