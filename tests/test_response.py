import bulkwalk
import pytest


def test_success():

    response = bulkwalk.response.SuccessResponse(42)

    assert response.ready == True
    assert response.failed == False
    assert response.error is None
    assert response.get() == 42
    assert response.get() == 42


def test_failure():

    error = bulkwalk.errors.RequestTimeout('gone')
    response = bulkwalk.response.ExceptionResponse(error)

    assert response.ready == True
    assert response.failed == True
    assert response.error is error

    # Raised on every demand, not on construction.
    for attempt in range(2):
        with pytest.raises(bulkwalk.errors.RequestTimeout) as caught:
            response.get()
        assert caught.value is error


def test_not_ready():

    resume = object()
    result = bulkwalk.response.NotReady(resume)

    assert result.ready == False
    assert result.resume is resume

    with pytest.raises(RuntimeError):
        result.get()


def test_event():

    session = object()
    event = bulkwalk.response.Event(session, bulkwalk.response.SuccessResponse('value'))

    assert event.session is session
    assert event.failed == False
    assert event.get() == 'value'

    event = bulkwalk.response.Event(session, bulkwalk.response.ExceptionResponse(KeyError('x')))
    assert event.failed == True

    with pytest.raises(KeyError):
        event.get()


def test_errors():

    for error in (bulkwalk.errors.EngineError, bulkwalk.errors.RequestTimeout,
                  bulkwalk.errors.TruncatedResponseError, bulkwalk.errors.NameNotFoundError,
                  bulkwalk.errors.ProtocolStatusError):
        assert issubclass(error, bulkwalk.errors.BulkwalkError)

    error = bulkwalk.errors.ProtocolStatusError(99, 3)
    assert error.status_text == 'status 99'
    assert str(error) == 'response indicates status 99 at index 3'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
