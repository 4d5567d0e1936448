# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Allow ``python -m pyiwyu``."""

from __future__ import annotations

from .cli.app import main

main()
