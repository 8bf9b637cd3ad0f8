import random

import pytest

from ad_composer.catalog import build_default_catalog
from factories import make_png


@pytest.fixture
def catalog():
    return build_default_catalog()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def product_png():
    return make_png()
