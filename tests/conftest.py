from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.docs_builder import DocsBuilder


@pytest.fixture
def docs_builder(tmp_path: Path) -> DocsBuilder:
    """Provide a reusable docs tree rooted at the pytest tmp_path."""
    return DocsBuilder(tmp_path)


@pytest.fixture(autouse=True)
def reset_altlang_logger() -> Iterator[None]:
    """Undo CLI logging setup so caplog sees every altlang record."""
    yield
    logger = logging.getLogger("altlang")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
