# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides sample pages, isolated settings and temporary cache roots.
No external dependencies; all I/O stays under tmp_path.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pagequeries.config.settings import Settings


# === FIXTURES: Sample data ===


SALES_PAGE = """# Sales

Some prose about sales.

```orders
select * from orders
```

```monthly
select month, sum(total) from ${orders} group by month
```

```python
print("${not_a_query}")
```
"""


@pytest.fixture
def sales_page() -> str:
    """Page with two chained queries and one display block."""
    return SALES_PAGE


@pytest.fixture
def prose_page() -> str:
    """Page without any named query."""
    return "# About\n\nNothing to query here.\n\n```js\nconsole.log(1)\n```\n"


# === FIXTURES: Configuration ===


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def settings(cache_root: Path) -> Settings:
    """Settings isolated from any .env file, caching under tmp_path."""
    return Settings(_env_file=None, cache_root=cache_root)


@pytest.fixture
def pages_root(tmp_path: Path) -> Path:
    """Empty ``<tmp>/site/src/pages`` directory."""
    root = tmp_path / "site" / "src" / "pages"
    root.mkdir(parents=True)
    return root
