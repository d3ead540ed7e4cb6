from __future__ import annotations

from typing import Callable

import pytest

from core.domain.reference import RefSpec
from fakes import SUBJECT_DIGEST, FakeResponse, FakeTransport


@pytest.fixture
def refspec() -> RefSpec:
    return RefSpec(locator="registry.example.com/acme/app", object="@" + SUBJECT_DIGEST)


@pytest.fixture
def make_response() -> Callable[..., FakeResponse]:
    return FakeResponse


@pytest.fixture
def make_transport() -> Callable[..., FakeTransport]:
    return FakeTransport
