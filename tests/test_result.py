import pytest

from sjlibwatcher.errors import WatcherError
from sjlibwatcher.result import Err, Ok


def test_map_wraps_value():
    assert Ok(2).map(lambda value: value * 3) == Ok(6)


def test_bind_returns_inner_result_without_double_wrapping():
    result = Ok(2).bind(lambda value: Ok(value + 1))
    assert result == Ok(3)

    failed = Ok(2).bind(lambda value: Err("nope"))
    assert failed == Err("nope")


def test_err_is_absorbing_and_never_calls_function():
    calls = []

    def record(value):
        calls.append(value)
        return Ok(value)

    original = Err(ValueError("boom"))
    assert original.bind(record) is original
    assert original.map(record) is original
    assert original.bind(record).map(record).bind(record) is original
    assert calls == []


def test_map_converts_raised_exception_to_err():
    def explode(value):
        raise RuntimeError(f"cannot handle {value}")

    result = Ok(1).map(explode)
    assert isinstance(result, Err)
    assert isinstance(result.error, RuntimeError)
    assert result.message == "cannot handle 1"


def test_bind_converts_raised_exception_to_err():
    result = Ok({}).bind(lambda mapping: mapping["missing"])
    assert isinstance(result, Err)
    assert isinstance(result.error, KeyError)


def test_fold_dispatches_on_variant():
    assert Ok(5).fold(lambda value: f"ok {value}", lambda error: "err") == "ok 5"
    assert Err("bad").fold(lambda value: "ok", lambda error: f"err {error}") == "err bad"


def test_unwrap_raises_stored_error():
    assert Ok("value").unwrap() == "value"

    with pytest.raises(KeyError):
        Err(KeyError("x")).unwrap()

    with pytest.raises(WatcherError, match="plain message"):
        Err("plain message").unwrap()
