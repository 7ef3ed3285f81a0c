# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from collections.abc import Callable
from typing import Any


class Repeater:
    """
    Execute a given function for each run of a production,
    with per-exception handling and tracking of encountered errors.

    Attributes:
        items (list[Any]): List of items (runs) to process.
        encountered_errors (dict[int, BaseException]): A dictionary mapping
            item indices to exceptions encountered during execution.
        results (dict[int, Any]): Return values of the function for the items
            that were processed without an error.
        current_iteration (int): The index of the item currently being processed.

    Args:
        items (list[Any]): A list of items to iterate over.
        func (Callable): Function to execute for each item. The item will be passed
            as the first argument, followed by any `*args` and `**kwargs`.
        *args (Any): Positional arguments forwarded to `func`.
        **kwargs (Any): Keyword arguments forwarded to `func`.
    """

    def __init__(
        self,
        items: list[Any],
        func: Callable,
        *args: Any,
        **kwargs: Any,
    ):
        self.encountered_errors: dict[int, BaseException] = {}
        self.results: dict[int, Any] = {}
        self.items = items
        self.current_iteration = 0

        self._handlers: dict[type[BaseException], Callable] = {}
        self._func = func
        self._args = args
        self._kwargs = kwargs

    def onException(self, exc_type: type[BaseException], handler: Callable) -> None:
        """
        Register a handler function for a specific exception type.

        Args:
            exc_type (type[BaseException]): The exception type to handle.
            handler (Callable): Function to call when `exc_type` (or a subclass) is raised.
                The handler must accept two arguments:
                - BaseException: The caught exception instance.
                - Repeater: Reference to this `Repeater` instance.
        """
        self._handlers[exc_type] = handler

    def run(self) -> None:
        """
        Execute the target function for all items, invoking handlers for exceptions.

        Exceptions with a registered handler are recorded in `encountered_errors`
        and the iteration continues with the next item.
        Unhandled exceptions propagate normally and interrupt the iteration.
        """
        for i, item in enumerate(self.items):
            self.current_iteration = i
            try:
                self.results[i] = self._func(item, *self._args, **self._kwargs)
            except tuple(self._handlers.keys()) as e:
                self.encountered_errors[i] = e
                self._findHandler(e)(e, self)

    def failedItems(self) -> list[Any]:
        """Get the items for which an exception was handled."""
        return [self.items[i] for i in sorted(self.encountered_errors)]

    def _findHandler(self, exception: BaseException) -> Callable:
        """
        Get the handler registered for the closest base class of the exception.
        """
        for cls in type(exception).__mro__:
            if cls in self._handlers:
                return self._handlers[cls]

        # should never get here
        raise KeyError(f"No handler registered for '{type(exception).__name__}'.")
