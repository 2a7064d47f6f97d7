from __future__ import annotations

import os

from hypothesis import HealthCheck, settings

_CI_PROFILE = "errcase_property_ci"
_DEV_PROFILE = "errcase_property_dev"
_PROFILE_ENV = "ERRCASE_HYPOTHESIS_PROFILE"

settings.register_profile(
    _CI_PROFILE,
    derandomize=True,
    max_examples=50,
    deadline=None,
    print_blob=True,
    suppress_health_check=(HealthCheck.too_slow,),
)
# local exploration: random seeds, more examples
settings.register_profile(
    _DEV_PROFILE,
    parent=settings.get_profile(_CI_PROFILE),
    derandomize=False,
    max_examples=200,
)


def pytest_configure(config: object) -> None:
    del config
    settings.load_profile(os.environ.get(_PROFILE_ENV, _CI_PROFILE))
