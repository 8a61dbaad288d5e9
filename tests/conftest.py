"""Shared fixtures for the verity test-suite."""

import pathlib
from dataclasses import dataclass
from typing import Any, Optional

import pytest

from verity.core.config import reset_config
from verity.report.listeners import DelegateListener

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def _reset_global_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture(scope="session")
def project_root():
    return pathlib.Path(__file__).resolve().parent.parent


@pytest.fixture
def events():
    """Collected AssertionEvents plus a listener feeding them."""
    collected = []
    return collected, DelegateListener(collected.append)


@dataclass
class Node:
    value: Any
    next: Optional["Node"] = None


def chain(length: int) -> Node:
    head = Node(0)
    node = head
    for i in range(1, length):
        node.next = Node(i)
        node = node.next
    return head


@pytest.fixture
def make_chain():
    return chain
