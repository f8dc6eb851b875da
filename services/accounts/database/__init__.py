"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from .base import Base
from .user import User
from .user_password_history import UserPasswordHistory
from .schema import create_schema, schema_statements

__all__ = ["Base", "User", "UserPasswordHistory", "create_schema",
           "schema_statements"]
