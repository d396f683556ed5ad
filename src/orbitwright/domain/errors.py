# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Domain error types."""


class ValidationError(ValueError):
    """Malformed or physically impossible model input.

    Raised before any computation starts, so a caller never receives a
    partially computed result.
    """
