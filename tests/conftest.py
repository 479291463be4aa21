import pytest

from fakes import FIXED_NOW, FakeEmployeeRepo, FakeLeaveRepo, make_compensation


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def employees_repo():
    return FakeEmployeeRepo(
        make_compensation("E1"),
        make_compensation("E2", base_salary="30000"),
        make_compensation("E3", base_salary=None),
    )


@pytest.fixture
def leaves_repo():
    return FakeLeaveRepo()
