# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from unittest.mock import Mock

import pytest

from acceff_lib.core.error import AccEffError, AccEffMissingError
from acceff_lib.core.repeater import Repeater


@pytest.fixture
def runs():
    return [195682, 195683, 195684]


def test_repeater_collects_results(runs):
    repeater = Repeater(runs, lambda run, offset: run + offset, 1)
    repeater.run()

    assert repeater.results == {0: 195683, 1: 195684, 2: 195685}
    assert repeater.encountered_errors == {}
    assert repeater.current_iteration == 2
    assert repeater.failedItems() == []


def test_repeater_forwards_keyword_arguments(runs):
    func = Mock(return_value=None)
    repeater = Repeater(runs[:1], func, dry_run=True)
    repeater.run()

    func.assert_called_once_with(195682, dry_run=True)


def test_repeater_records_handled_errors_and_continues(runs):
    def func(run):
        if run == 195683:
            raise AccEffError("no scaler")
        return run

    handler = Mock()
    repeater = Repeater(runs, func)
    repeater.onException(AccEffError, handler)
    repeater.run()

    handler.assert_called_once()
    exception, metadata = handler.call_args.args
    assert str(exception) == "no scaler"
    assert metadata is repeater
    assert repeater.failedItems() == [195683]
    assert set(repeater.results) == {0, 2}


def test_repeater_uses_handler_of_closest_base_class(runs):
    def func(run):
        if run == 195682:
            raise AccEffMissingError("missing")
        raise AccEffError("generic")

    generic = Mock()
    missing = Mock()
    repeater = Repeater(runs, func)
    repeater.onException(AccEffError, generic)
    repeater.onException(AccEffMissingError, missing)
    repeater.run()

    assert missing.call_count == 1
    assert generic.call_count == 2
    assert repeater.failedItems() == runs


def test_repeater_unhandled_exception_propagates(runs):
    def func(run):
        raise ValueError("unexpected")

    repeater = Repeater(runs, func)
    repeater.onException(AccEffError, Mock())

    with pytest.raises(ValueError):
        repeater.run()

    assert repeater.current_iteration == 0
