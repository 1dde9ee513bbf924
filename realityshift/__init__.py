# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Reality Shift backend: goals, challenges, habits and AI coaching over HTTP."""

__version__ = "0.1.0"
