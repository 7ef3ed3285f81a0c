# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


import os
from abc import ABCMeta

from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError
from acceff_lib.core.logger import get_logger

from .interface import GridInterface

logger = get_logger(__name__)


class GridMeta(ABCMeta):
    """
    Metaclass for Grid backend classes.
    """

    # registry of supported Grid backends
    _registry: dict[str, type[GridInterface]] = {}

    def __str__(cls: type[GridInterface]):
        """
        Get the string representation of the Grid backend class.
        """
        return cls.envName()

    @classmethod
    def register(mcs, grid_cls: type[GridInterface]) -> None:
        """
        Register a Grid backend class in the metaclass registry.
        """
        mcs._registry[grid_cls.envName()] = grid_cls

    @classmethod
    def fromStr(mcs, name: str) -> type[GridInterface]:
        """
        Return the Grid backend class registered with the given name (case-insensitive).

        Raises:
            AccEffError: If no class is registered for the given name.
        """
        for registered, grid_cls in mcs._registry.items():
            if registered.lower() == name.lower():
                return grid_cls

        raise AccEffError(
            f"No Grid backend registered as '{name}'. Available: {', '.join(mcs._registry)}."
        )

    @classmethod
    def obtain(mcs, name: str | None) -> type[GridInterface]:
        """
        Obtain a Grid backend class by name, environment variable, or the configured default.

        Raises:
            AccEffError: If the requested backend is not registered.
        """
        if name:
            return mcs.fromStr(name)

        if env_name := os.environ.get(CFG.env_vars.grid):
            logger.debug(f"Using Grid backend from an environment variable: {env_name}.")
            return mcs.fromStr(env_name)

        return mcs.fromStr(CFG.default_grid)


def grid_backend(cls: type[GridInterface]) -> type[GridInterface]:
    """
    Class decorator registering a Grid backend in `GridMeta`.
    """
    GridMeta.register(cls)
    return cls
