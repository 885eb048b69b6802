import matplotlib

matplotlib.use("Agg")

import pytest

from core.job import Job


@pytest.fixture
def sample_jobs():
    """Three overlapping jobs with distinct service times and priorities"""
    return [
        Job("A", 0, 5, 1),
        Job("B", 1, 2, 5),
        Job("C", 2, 1, 3),
    ]
