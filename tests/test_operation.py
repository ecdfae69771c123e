import logging
import threading
import time

import bulkwalk
import pytest

import tables


def test_get(open_session, catalog):

    session = open_session(catalog=catalog)
    response = session.get('sysName.0', 'sysUpTime.0')

    assert response.ready == True
    assert response.failed == False

    result = response.get()
    assert isinstance(result, bulkwalk.protocol.VarbindCollection)
    assert len(result) == 2
    assert result['sysName'].value == 'agent.example.com'
    assert result['sysUpTime'].formatted == '1 day, 0:00:01.23'
    assert result[0].name == 'sysName.0'


def test_get_next(open_session, catalog):

    session = open_session(catalog=catalog)
    result = session.get_next('ifDescr', 'ifOperStatus.1').get()

    assert result['ifDescr'].name == 'ifDescr.1'
    assert result['ifDescr'].value == 'eth1'
    assert result['ifOperStatus'].name == 'ifOperStatus.2'
    assert result['ifOperStatus'].formatted == 'down'


def test_get_bulk(open_session, catalog):

    session = open_session(catalog=catalog)
    result = session.get_bulk(1, 2, 'sysUpTime', 'ifIndex', 'ifDescr').get()

    names = [varbind.name for varbind in result]
    assert names == ['sysUpTime.0', 'ifIndex.1', 'ifDescr.1', 'ifIndex.2', 'ifDescr.2']

    with pytest.raises(ValueError):
        session.new_get_bulk(4, 2, 'sysUpTime', 'ifIndex')


def test_set(open_session, catalog):

    agent = tables.interface_agent(1)
    session = open_session(agent=agent, catalog=catalog)

    varbind = session.new_varbind('sysName.0', 'renamed')
    response = session.set(varbind)

    assert response.get()['sysName'].value == 'renamed'
    assert agent.value(tables.SYS_NAME + (0,)) == 'renamed'

    missing = session.new_varbind('1.3.6.1.6.0', 1)
    response = session.set(missing)

    assert response.failed == True
    with pytest.raises(bulkwalk.errors.ProtocolStatusError) as caught:
        response.get()

    assert caught.value.status == bulkwalk.protocol.fields.NO_CREATION
    assert caught.value.index == 1
    assert caught.value.status_text == 'noCreation'
    assert str(caught.value) == 'response indicates noCreation at index 1'


def test_timeout_envelope(open_session):

    session = open_session(drop_all=True, retries=1, timeout=0.05)

    begin = time.monotonic()
    response = session.get('1.3.6.1.2.1.1.5.0')
    elapsed = time.monotonic() - begin

    # The failure is captured, not raised, until the value is demanded.

    assert response.failed == True
    assert isinstance(response.error, bulkwalk.errors.RequestTimeout)
    assert elapsed >= 0.1

    with pytest.raises(bulkwalk.errors.RequestTimeout):
        response.get()


def test_validate():

    operation = bulkwalk.operation.GetOperation(None, ())

    with pytest.raises(bulkwalk.errors.RequestTimeout):
        operation.validate(None)

    response = bulkwalk.protocol.Pdu('RESPONSE', error_status=5, error_index=2)

    with pytest.raises(bulkwalk.errors.ProtocolStatusError) as caught:
        operation.validate(response)

    assert str(caught.value) == 'response indicates genErr at index 2'


def test_unknown_name(open_session, catalog):

    session = open_session(catalog=catalog)

    with pytest.raises(bulkwalk.errors.NameNotFoundError):
        session.new_get('ifAlias.1')


def test_async(open_session, catalog):

    session = open_session(catalog=catalog)

    events = list()
    threads = list()
    done = threading.Event()

    def callback(event):
        events.append(event)
        threads.append(threading.current_thread().name)
        done.set()

    session.async_get(callback, 'sysName.0')

    assert done.wait(2) == True
    assert len(events) == 1

    event = events[0]
    assert isinstance(event, bulkwalk.response.Event)
    assert event.session is session
    assert event.get()['sysName'].value == 'agent.example.com'

    # Delivered on a runtime worker, not the engine thread.
    assert threads[0].startswith('bulkwalk-worker')


def test_async_failure(open_session):

    session = open_session(drop_all=True, timeout=0.05)

    events = list()
    done = threading.Event()

    def callback(event):
        events.append(event)
        done.set()

    session.async_get_next(callback, '1.3.6.1.2.1.1')

    assert done.wait(2) == True
    assert events[0].failed == True

    with pytest.raises(bulkwalk.errors.RequestTimeout):
        events[0].get()


def test_callback_exception(open_session, caplog):

    session = open_session()
    done = threading.Event()

    def broken(event):
        done.set()
        raise ValueError('callback failure')

    with caplog.at_level(logging.ERROR, logger='bulkwalk.operation'):
        session.async_get(broken, '1.3.6.1.2.1.1.5.0')
        assert done.wait(2) == True

        # The exception is logged by the worker after the callback returns.
        deadline = time.monotonic() + 2
        while 'callback failure' not in caplog.text and time.monotonic() < deadline:
            time.sleep(0.01)

    assert 'callback failure' in caplog.text

    # The session is still usable.
    assert session.get('1.3.6.1.2.1.1.5.0').failed == False


def test_interrupt(open_session, runtime):

    session = open_session(drop_all=True, retries=3, timeout=10)
    engine = session.engine
    operation = session.new_get('1.3.6.1.2.1.1.5.0')

    outcome = list()

    def invoke():
        outcome.append(operation.invoke())

    waiter = threading.Thread(target=invoke)
    waiter.start()

    deadline = time.monotonic() + 2
    while engine.sent == 0 and time.monotonic() < deadline:
        time.sleep(0.01)

    operation.interrupt()
    waiter.join(2)

    assert waiter.is_alive() == False
    assert len(outcome) == 1

    response = outcome[0]
    assert response.failed == True
    assert isinstance(response.error, bulkwalk.errors.RequestTimeout)

    # The request is cancelled: no timer is left, and nothing is resent.

    assert runtime.scheduler.pending() == 0
    time.sleep(0.2)
    assert engine.sent == 1


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
