import os

import bulkwalk
import pytest


@pytest.fixture
def home(tmp_path, monkeypatch):
    """ Point the configuration directory at a temporary location, and
        clear any environment overrides from the surrounding shell.
    """

    monkeypatch.setattr(bulkwalk.config.directory, 'found', None)
    monkeypatch.setenv('BULKWALK_HOME', str(tmp_path))

    for variable in ('BULKWALK_RETRIES', 'BULKWALK_TIMEOUT',
                     'BULKWALK_MAX_REPETITIONS', 'BULKWALK_ALLOW_TRUNCATED'):
        monkeypatch.delenv(variable, raising=False)

    return tmp_path


def test_builtin_defaults(home):

    config = bulkwalk.config.defaults()

    assert config.retries == 2
    assert config.timeout == 10.0
    assert config.walk_max_repetitions == 10
    assert config.walk_allows_truncated_repetition == False


def test_directory(home, tmp_path, monkeypatch):

    assert bulkwalk.config.directory() == str(home)
    assert bulkwalk.home() == str(home)

    # The location is cached after the first call.
    monkeypatch.setenv('BULKWALK_HOME', '/nonexistent')
    assert bulkwalk.config.directory() == str(home)

    override = tmp_path / 'elsewhere'
    assert bulkwalk.config.directory(str(override)) == str(override)
    assert os.path.isdir(override)

    with pytest.raises(ValueError):
        bulkwalk.config.directory('relative/path')


def test_targets_file(home):

    with open(home / 'targets.json', 'wb') as writing:
        writing.write(bulkwalk.json.dumps({'retries': 5, 'walk_max_repetitions': 25}))

    config = bulkwalk.config.defaults()

    assert config.retries == 5
    assert config.walk_max_repetitions == 25
    assert config.timeout == 10.0


def test_environment(home, monkeypatch):

    with open(home / 'targets.json', 'wb') as writing:
        writing.write(bulkwalk.json.dumps({'retries': 5}))

    monkeypatch.setenv('BULKWALK_RETRIES', '1')
    monkeypatch.setenv('BULKWALK_TIMEOUT', '0.5')
    monkeypatch.setenv('BULKWALK_ALLOW_TRUNCATED', 'yes')

    config = bulkwalk.config.defaults()

    assert config.retries == 1
    assert config.timeout == 0.5
    assert config.walk_allows_truncated_repetition == True


def test_update():

    config = bulkwalk.TargetConfig()
    copied = config.copy()

    assert copied == config
    assert copied is not config

    copied.update(retries='3', walk_allows_truncated_repetition='off')
    assert copied.retries == 3
    assert copied.walk_allows_truncated_repetition == False
    assert copied != config

    with pytest.raises(KeyError):
        config.update(community='public')

    with pytest.raises(ValueError):
        config.update(timeout=0)

    with pytest.raises(ValueError):
        config.update(retries=-1)

    with pytest.raises(ValueError):
        config.update(walk_max_repetitions=0)

    with pytest.raises(ValueError):
        config.update(walk_allows_truncated_repetition='perhaps')

    assert config.to_dict() == {
        'retries': 2,
        'timeout': 10.0,
        'walk_max_repetitions': 10,
        'walk_allows_truncated_repetition': False,
    }


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
