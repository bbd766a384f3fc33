from __future__ import annotations

from datetime import time

import pytest
from werkzeug.security import generate_password_hash

from fakes import FIXED_NOW
from src.chronos_pro.chronos_pro.core.enums import AllowedPunchMethod, Role
from src.chronos_pro.chronos_pro.employees.model import Profile
from src.chronos_pro.chronos_pro.locations.model import Location


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now):
    return lambda: fixed_now


@pytest.fixture
def make_profile():
    def _make(user_id=1, full_name="Ana Costa", **overrides):
        data = dict(
            user_id=user_id,
            full_name=full_name,
            email=f"user{user_id}@chronos.local",
            password_hash=generate_password_hash("secret123"),
            role=Role.EMPLOYEE,
            work_start=time(9, 0),
            work_end=time(18, 0),
            punch_method=AllowedPunchMethod.BOTH,
        )
        data.update(overrides)
        return Profile(**data)

    return _make


@pytest.fixture
def office():
    return Location(location_id=1, name="Lisbon HQ", latitude=38.7223, longitude=-9.1393, radius_meters=100, is_default=True)


@pytest.fixture
def descriptor():
    return [0.1] * 128
