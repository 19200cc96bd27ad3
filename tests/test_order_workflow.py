import pytest

from medtrack.core.errors import InvalidTransition, Unauthorized
from medtrack.models.enums import OrderStatus, Role
from medtrack.services import order_workflow

ADMIN = {Role.ADMIN}


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (OrderStatus.PENDING, OrderStatus.APPROVED),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.APPROVED, OrderStatus.SHIPPED),
        (OrderStatus.APPROVED, OrderStatus.CANCELLED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
    ],
)
def test_allowed_transitions(current, target):
    assert order_workflow.validate_transition(current, target, ADMIN) == target


def test_pending_cannot_skip_to_shipped():
    with pytest.raises(InvalidTransition):
        order_workflow.validate_transition(OrderStatus.PENDING, OrderStatus.SHIPPED, ADMIN)


@pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
@pytest.mark.parametrize("target", list(OrderStatus))
def test_terminal_states_reject_every_transition(terminal, target):
    assert order_workflow.is_terminal(terminal)
    with pytest.raises(InvalidTransition):
        order_workflow.validate_transition(terminal, target, ADMIN)


def test_same_state_is_not_a_transition():
    with pytest.raises(InvalidTransition):
        order_workflow.validate_transition(OrderStatus.APPROVED, OrderStatus.APPROVED, ADMIN)


@pytest.mark.parametrize("roles", [set(), {Role.SUPPLIER}, {Role.PHARMACIST}, {Role.SUPPLIER, Role.PHARMACIST}])
def test_non_admin_is_unauthorized_even_for_valid_moves(roles):
    with pytest.raises(Unauthorized):
        order_workflow.validate_transition(OrderStatus.PENDING, OrderStatus.APPROVED, roles)


def test_authorization_is_checked_before_the_table():
    with pytest.raises(Unauthorized):
        order_workflow.validate_transition(OrderStatus.DELIVERED, OrderStatus.PENDING, {Role.SUPPLIER})


def test_next_statuses():
    assert order_workflow.next_statuses(OrderStatus.PENDING) == [OrderStatus.APPROVED, OrderStatus.CANCELLED]
    assert order_workflow.next_statuses(OrderStatus.SHIPPED) == [OrderStatus.DELIVERED]
    assert order_workflow.next_statuses(OrderStatus.CANCELLED) == []
    assert order_workflow.INITIAL_STATUS == OrderStatus.PENDING
