from __future__ import annotations

import typing

import pytest

from diplomatic import Client

from . import Handler, SelfHandler


@pytest.fixture
def handler() -> Handler:
    return Handler()


@pytest.fixture
def self_handler() -> SelfHandler:
    return SelfHandler()


@pytest.fixture(autouse=True)
def clear_creators() -> typing.Generator[None, None, None]:
    Client.clear_creators()
    yield
    Client.clear_creators()
