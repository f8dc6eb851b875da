"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
from http import HTTPStatus
import logging
import typing
from pydantic import BaseModel, ValidationError
import quart
from uservault_common.errors import ErrorKind, ServiceError

# Header the gateway uses to pass the already-authenticated caller id.
CALLER_ID_HEADER = "X-User-Id"

ERROR_KIND_TO_STATUS: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: HTTPStatus.CONFLICT,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.BAD_REQUEST: HTTPStatus.BAD_REQUEST,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}

ModelT = typing.TypeVar("ModelT", bound=BaseModel)


class BaseApiView:
    """
    Shared helpers for API views: request body validation, caller identity
    extraction and conversion of ``ServiceError`` into HTTP responses.
    """
    # pylint: disable=too-few-public-methods

    _logger: logging.Logger

    async def _parse_request(self, model: type[ModelT]) -> ModelT:
        """
        Validate the JSON body of the current request against ``model``.

        Raises:
            ServiceError: BAD_REQUEST if the body is missing, not an object
                or fails validation.
        """
        data = await quart.request.get_json(silent=True)

        if not isinstance(data, dict):
            raise ServiceError(ErrorKind.BAD_REQUEST,
                               "Invalid or missing JSON body")

        try:
            return model(**data)

        except ValidationError as ex:
            # Input values are left out, they may carry a password.
            details = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in ex.errors())
            raise ServiceError(ErrorKind.BAD_REQUEST,
                               f"Invalid request: {details}") from ex

    @staticmethod
    def _caller_id() -> int:
        """
        Numeric id of the caller as resolved by the gateway.

        Raises:
            ServiceError: BAD_REQUEST if the header is absent or not an
                integer.
        """
        raw = quart.request.headers.get(CALLER_ID_HEADER)

        if raw is None:
            raise ServiceError(ErrorKind.BAD_REQUEST,
                               "missing userID from token")

        try:
            return int(raw)

        except ValueError as ex:
            raise ServiceError(ErrorKind.BAD_REQUEST, "invalid userID",
                               cause=ex) from ex

    def _error_response(self, error: ServiceError):
        status = ERROR_KIND_TO_STATUS.get(error.kind,
                                          HTTPStatus.INTERNAL_SERVER_ERROR)

        if error.kind == ErrorKind.INTERNAL:
            self._logger.error("Internal error: %s (cause: %r)",
                               error.message, error.cause)
        elif error.cause is not None:
            self._logger.debug("%s: %s (cause: %r)", error.kind.name,
                               error.message, error.cause)

        body: dict = {"error": error.message}
        if error.kind == ErrorKind.ALREADY_EXISTS and error.field:
            body["field"] = error.field

        return quart.jsonify(body), status

    @staticmethod
    def _acknowledge():
        """ Empty acknowledgement returned by mutating endpoints. """
        return quart.jsonify({}), HTTPStatus.OK
