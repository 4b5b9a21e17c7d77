from __future__ import annotations

import pytest

from fairgoals.config import reset_config
from fairgoals.model import ModelState


@pytest.fixture()
def forward_model() -> ModelState:
    """Home-favoured model: supremacy -0.5, expectancy 2.75."""

    return ModelState.from_supremacy(-0.5, 2.75)


@pytest.fixture()
def goalless_model() -> ModelState:
    return ModelState.from_rates(0.0, 0.0)


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()
