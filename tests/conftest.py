"""Shared fixtures for the state machine tests."""
import logging

import pytest

from trigger_fsm.phone import PhoneContext, build_phone_table, new_phone


@pytest.fixture
def phone_table():
    """Telephone table including the guarded destruction rule."""
    return build_phone_table()


@pytest.fixture
def phone_context():
    return PhoneContext()


@pytest.fixture
def phone(phone_table, phone_context):
    """Phone machine starting off the hook."""
    return new_phone(context=phone_context, table=phone_table)


@pytest.fixture
def restore_root_logging():
    """Put the root logger handlers and level back after a test reconfigures them."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)
