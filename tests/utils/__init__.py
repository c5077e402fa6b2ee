"""
Test utilities package for l10n-catalog tests.

This package provides helper functions shared across the test suite:
builders for catalog units and documents, a writer that puts a document on
disk as a PO catalog, and helpers for temporary YAML configuration files.

## Usage Examples

### Building documents
```python
from tests.utils.test_helpers import make_document, make_unit

doc = make_document([make_unit("Main.Title", "Welcome")], product_version="2.0")
```

### Temporary configuration files
```python
from tests.utils.test_helpers import create_temp_config_file, minimal_config_data

with create_temp_config_file(minimal_config_data(tmp_path)) as config_path:
    config = ConfigManager.load_config(config_path)
```

The utilities themselves are tested in `tests/unit/utils/test_test_helpers.py`.
"""

from __future__ import annotations

from .test_helpers import (
    assert_notes_equal,
    create_temp_config_file,
    make_document,
    make_unit,
    minimal_config_data,
    write_catalog,
)

__all__ = [
    "make_unit",
    "make_document",
    "write_catalog",
    "create_temp_config_file",
    "minimal_config_data",
    "assert_notes_equal",
]
