from datetime import datetime, timedelta

import pytest


class TickingClock:
    """Returns a strictly increasing datetime on every call."""

    def __init__(self, start=datetime(2024, 1, 1, 10, 0, 0), step=timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self):
        self.now += self.step
        return self.now


@pytest.fixture
def clock():
    return TickingClock()
