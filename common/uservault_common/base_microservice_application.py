"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import abc
import asyncio
import logging
import typing


class BaseMicroserviceApplication(abc.ABC):
    """
    Lifecycle skeleton shared by the UserVault microservices.

    Subclasses implement ``_initialise``, ``_main_loop`` and ``_shutdown``;
    this class sequences them and owns the shutdown events.
    """
    __slots__ = ["_is_initialised", "_logger", "_shutdown_complete",
                 "_shutdown_event"]

    def __init__(self):
        self._is_initialised: bool = False
        self._logger: typing.Optional[logging.Logger] = None
        self._shutdown_event: asyncio.Event = asyncio.Event()
        self._shutdown_complete: asyncio.Event = asyncio.Event()

    @property
    def logger(self) -> logging.Logger:
        """ Logger used by the microservice. """
        return self._logger

    @logger.setter
    def logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def is_initialised(self) -> bool:
        """ True once ``initialise`` has completed successfully. """
        return self._is_initialised

    @property
    def shutdown_event(self) -> asyncio.Event:
        """
        Set when the service has been asked to stop. The run loop checks it
        between iterations.
        """
        return self._shutdown_event

    @property
    def shutdown_complete(self) -> asyncio.Event:
        """ Set once ``_shutdown`` has finished its cleanup. """
        return self._shutdown_complete

    async def initialise(self) -> bool:
        """
        Run the subclass initialisation.

        Returns:
            bool: True if the service is ready to run, otherwise False (in
            which case the service has already been stopped).
        """
        if await self._initialise() is True:
            self._is_initialised = True
            return True

        await self.stop()
        return False

    async def run(self) -> None:
        """ Drive ``_main_loop`` until the shutdown event is set. """

        if not self._is_initialised:
            self._logger.warning("Microservice is not initialised, "
                                 "refusing to start the run loop.")
            return

        self._logger.info("Microservice starting main loop.")

        try:
            while not self._shutdown_event.is_set():
                await self._main_loop()
                await asyncio.sleep(0.1)

        except asyncio.CancelledError:
            self._logger.debug("Service: Cancellation received.")
            raise

        finally:
            self._logger.info("Exiting microservice run loop...")
            await self.stop()

    async def stop(self) -> None:
        """ Signal shutdown, run ``_shutdown`` and mark completion. """
        if self._shutdown_complete.is_set():
            return

        if self._logger:
            self._logger.info("Stopping microservice...")

        self._shutdown_event.set()

        await self._shutdown()
        self._shutdown_complete.set()

        if self._logger:
            self._logger.info("Microservice shutdown complete.")

    async def _initialise(self) -> bool:
        """
        Subclass initialisation hook.

        Returns:
            bool: True => Successful, False => Unsuccessful.
        """
        return True

    @abc.abstractmethod
    async def _main_loop(self) -> None:
        """ Single iteration of the background loop. """

    @abc.abstractmethod
    async def _shutdown(self):
        """ Release resources held by the microservice. """
