import pytest
from prompt_toolkit.key_binding import KeyBindings

from devflow.cancellation import CancellationBroker, CancellationHandle, get_broker
from devflow.exceptions import BrokerBusyError


def make_handle(name="step", log=None):
    log = [] if log is None else log
    return CancellationHandle(name, on_cancel=lambda: log.append(name))


def test_signal_without_pending_prompt_has_no_effect():
    broker = CancellationBroker()
    assert broker.signal() is False
    assert broker.occupant is None


def test_signal_cancels_occupant_once():
    broker = CancellationBroker()
    log = []
    handle = make_handle("scope", log)

    with broker.pending(handle):
        assert broker.occupant is handle
        assert broker.signal() is True
        assert broker.signal() is True

    assert log == ["scope"]
    assert handle.cancelled
    assert broker.occupant is None


def test_claim_while_occupied_raises():
    broker = CancellationBroker()
    broker.claim(make_handle("first"))
    with pytest.raises(BrokerBusyError, match="first"):
        broker.claim(make_handle("second"))


def test_release_only_clears_own_handle():
    broker = CancellationBroker()
    first = make_handle("first")
    broker.claim(first)
    broker.release(make_handle("stranger"))
    assert broker.occupant is first
    broker.release(first)
    assert broker.occupant is None


def test_pending_releases_on_error():
    broker = CancellationBroker()
    with pytest.raises(RuntimeError):
        with broker.pending(make_handle()):
            raise RuntimeError("render failed")
    assert broker.occupant is None


def test_key_bindings_are_attached_lazily_once():
    broker = CancellationBroker(key="c-b")
    assert not broker.attached
    bindings = broker.key_bindings
    assert isinstance(bindings, KeyBindings)
    assert broker.key_bindings is bindings
    assert broker.attached
    assert len(bindings.bindings) == 1


def test_get_broker_returns_process_default():
    assert get_broker() is get_broker()
    assert isinstance(get_broker(), CancellationBroker)
