"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import enum
import typing


class ErrorKind(enum.Enum):
    """ Kinds of failure a service operation can report to its caller """

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    INTERNAL = "internal"


class ServiceError(Exception):
    """
    Single exception type raised across the service layers.

    The ``kind`` tags the failure, ``message`` is the text that may be shown
    to the caller and ``field`` names the offending attribute for field
    scoped errors (e.g. the column that collided on a uniqueness check).
    The ``cause`` holds the underlying exception for diagnostics only and is
    never rendered into a response.

    Attributes:
        kind (ErrorKind): Failure classification.
        message (str): Public, caller-safe message.
        field (Optional[str]): Field the error relates to, if any.
        cause (Optional[BaseException]): Internal cause, if any.
    """

    def __init__(self,
                 kind: ErrorKind,
                 message: str,
                 field: typing.Optional[str] = None,
                 cause: typing.Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field = field
        self.cause = cause

    def __repr__(self) -> str:
        return (f"ServiceError(kind={self.kind.name}, "
                f"message={self.message!r}, field={self.field!r})")


def not_found(entity: str, field: str, value: typing.Any) -> ServiceError:
    """ Lookup miss, or a mutation that affected zero rows. """
    return ServiceError(ErrorKind.NOT_FOUND,
                        f"{entity} with {field}={value} not found",
                        field=field)


def already_exists(entity: str, field: str, value: typing.Any) -> ServiceError:
    """ Uniqueness violation on ``field``. """
    return ServiceError(ErrorKind.ALREADY_EXISTS,
                        f"{entity} with {field}={value} already exists",
                        field=field)


def forbidden(message: str) -> ServiceError:
    return ServiceError(ErrorKind.FORBIDDEN, message)


def bad_request(message: str) -> ServiceError:
    return ServiceError(ErrorKind.BAD_REQUEST, message)


def bad_request_hidden(cause: typing.Optional[BaseException],
                       message: str) -> ServiceError:
    """
    Bad request whose public message deliberately masks the real reason.

    The distinguishing cause is kept on the error so it can be logged, but
    only ``message`` is ever returned to the caller.
    """
    return ServiceError(ErrorKind.BAD_REQUEST, message, cause=cause)


def internal(cause: typing.Optional[BaseException],
             message: str = "internal error") -> ServiceError:
    return ServiceError(ErrorKind.INTERNAL, message, cause=cause)
