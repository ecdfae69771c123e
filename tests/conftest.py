import pytest

import bulkwalk
import tables


# Short enough for the retry tests to finish quickly, long enough that a
# loaded test host does not time out requests to the in-process agent.

FAST = {'retries': 0, 'timeout': 2.0}


@pytest.fixture
def runtime():

    runtime = bulkwalk.Runtime()
    yield runtime
    runtime.shutdown()


@pytest.fixture
def catalog():
    return bulkwalk.Catalog(tables.CATALOG)


@pytest.fixture
def open_session(runtime):
    """ Return a function that opens a session on a loopback engine. The
        keyword arguments *delay*, *drop*, and *drop_all* configure the
        engine; any others are target configuration settings.
    """

    sessions = list()

    def open_session(agent=None, catalog=None, engine=None, delay=0, drop=0, drop_all=False, **settings):

        if engine is None:
            if agent is None:
                agent = tables.interface_agent(3)
            engine = bulkwalk.transport.loopback.Engine(agent, delay=delay, drop=drop, drop_all=drop_all)

        config = dict(FAST)
        config.update(settings)
        config = bulkwalk.TargetConfig(**config)

        session = bulkwalk.Session(engine, ('agent', 161), runtime, config=config,
                                   catalog=catalog, owns_engine=True)
        sessions.append(session)
        return session

    yield open_session

    for session in sessions:
        session.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
