"""
Conditional cbor2 import module.

This module provides a centralized location for importing the CBOR decoder.
The ``cbor2`` package is used by default. Set the environment variable CBOR_PURE_PYTHON=1
to decode with the pure Python ``cbor2pure`` package instead (installed with the ``pure`` extra).
"""

import os

if os.getenv("CBOR_PURE_PYTHON", "0") == "1":
    import cbor2pure as cbor2  # type: ignore  # noqa: F401
else:
    import cbor2  # noqa: F401
