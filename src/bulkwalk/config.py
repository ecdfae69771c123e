""" Per-target configuration for bulkwalk sessions, and the location of
    on-disk configuration files. Defaults may be supplied in a
    ``targets.json`` file in the :func:`directory`, and overridden with
    ``BULKWALK_*`` environment variables.
"""

import os
import threading

from . import json


DEFAULT_RETRIES = 2
DEFAULT_TIMEOUT = 10.0
DEFAULT_WALK_MAX_REPETITIONS = 10
DEFAULT_WALK_ALLOWS_TRUNCATED_REPETITION = False

_environment = {
    'retries': 'BULKWALK_RETRIES',
    'timeout': 'BULKWALK_TIMEOUT',
    'walk_max_repetitions': 'BULKWALK_MAX_REPETITIONS',
    'walk_allows_truncated_repetition': 'BULKWALK_ALLOW_TRUNCATED',
}

_load_lock = threading.Lock()


class TargetConfig:
    """ The tunable parameters governing requests sent to a single target:

        * *retries*: how many times a request is resent after its first
          attempt times out; a request makes at most ``retries + 1`` attempts.
        * *timeout*: seconds to wait for each attempt.
        * *walk_max_repetitions*: the repetition count requested by each
          bulk fetch issued by a walker.
        * *walk_allows_truncated_repetition*: whether a walker accepts a
          bulk response that could not hold one complete row, and narrows
          its column set to fit, rather than failing the walk.
    """

    def __init__(self, retries=DEFAULT_RETRIES, timeout=DEFAULT_TIMEOUT,
                       walk_max_repetitions=DEFAULT_WALK_MAX_REPETITIONS,
                       walk_allows_truncated_repetition=DEFAULT_WALK_ALLOWS_TRUNCATED_REPETITION):

        self.retries = 0
        self.timeout = 0.0
        self.walk_max_repetitions = 1
        self.walk_allows_truncated_repetition = False

        self.update(retries=retries, timeout=timeout,
                    walk_max_repetitions=walk_max_repetitions,
                    walk_allows_truncated_repetition=walk_allows_truncated_repetition)


    def __eq__(self, other):
        if isinstance(other, TargetConfig):
            return self.to_dict() == other.to_dict()
        return NotImplemented


    def __repr__(self):
        arguments = ', '.join('%s=%r' % (key, value) for key, value in self.to_dict().items())
        return 'TargetConfig(' + arguments + ')'


    def copy(self):
        return TargetConfig(**self.to_dict())


    def to_dict(self):
        return {
            'retries': self.retries,
            'timeout': self.timeout,
            'walk_max_repetitions': self.walk_max_repetitions,
            'walk_allows_truncated_repetition': self.walk_allows_truncated_repetition,
        }


    def update(self, **kwargs):
        """ Set one or more parameters by name. Values are coerced to their
            expected type; a :class:`KeyError` is raised for an unknown
            parameter name, a :class:`ValueError` for a value out of range.
        """

        for key in kwargs:
            if key not in _environment:
                raise KeyError('unknown target parameter: ' + repr(key))

        try:
            retries = kwargs['retries']
        except KeyError:
            pass
        else:
            retries = int(retries)
            if retries < 0:
                raise ValueError('retries must be non-negative')
            self.retries = retries

        try:
            timeout = kwargs['timeout']
        except KeyError:
            pass
        else:
            timeout = float(timeout)
            if timeout <= 0:
                raise ValueError('timeout must be positive')
            self.timeout = timeout

        try:
            repetitions = kwargs['walk_max_repetitions']
        except KeyError:
            pass
        else:
            repetitions = int(repetitions)
            if repetitions < 1:
                raise ValueError('walk_max_repetitions must be at least 1')
            self.walk_max_repetitions = repetitions

        try:
            allowed = kwargs['walk_allows_truncated_repetition']
        except KeyError:
            pass
        else:
            self.walk_allows_truncated_repetition = to_boolean(allowed)


# end of class TargetConfig



def to_boolean(value):
    """ Interpret *value* as a boolean. Strings are accepted the way they
        would appear in an environment variable: 'true', 'yes', 'on', or '1'
        are True, 'false', 'no', 'off', '0', or an empty string are False.
    """

    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ('true', 'yes', 'on', '1'):
            return True
        if lowered in ('false', 'no', 'off', '0', ''):
            return False
        raise ValueError('cannot interpret as boolean: ' + repr(value))

    return bool(value)



def defaults():
    """ Return a new :class:`TargetConfig` populated with the defaults for
        this host: the built-in values, updated by the contents of
        ``targets.json`` in the configuration :func:`directory` (if it
        exists), updated again by any ``BULKWALK_*`` environment variables.
        A fresh instance is returned on every call; callers are free to
        modify it.
    """

    config = TargetConfig()

    with _load_lock:
        block = load()

    if block:
        config.update(**block)

    overrides = dict()
    for key, variable in _environment.items():
        try:
            overrides[key] = os.environ[variable]
        except KeyError:
            pass

    if overrides:
        config.update(**overrides)

    return config



def load(filename=None):
    """ Return the dictionary stored in ``targets.json``, or an empty
        dictionary if the file does not exist. The *filename* defaults to
        ``targets.json`` in the configuration :func:`directory`.
    """

    if filename is None:
        filename = os.path.join(directory(), 'targets.json')

    try:
        with open(filename, 'rb') as loading:
            raw = loading.read()
    except FileNotFoundError:
        return dict()

    block = json.loads(raw)

    if isinstance(block, dict):
        pass
    else:
        raise ValueError('expected a JSON object in ' + repr(filename))

    return block



def directory(default=None):
    """ Return the directory location where we should be loading
        configuration files. This defaults to ``$HOME/.bulkwalk``, but can be
        overridden by calling this method with a valid path, or by setting
        the ``BULKWALK_HOME`` environment variable. Note that changes to the
        environment variable will be ignored unless it is set prior to the
        first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        if os.path.exists(default):
            pass
        else:
            os.makedirs(default, mode=0o775)

        os.environ['BULKWALK_HOME'] = default
        directory.found = default


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['BULKWALK_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('BULKWALK_HOME and HOME environment variables not set, cannot determine bulkwalk configuration directory')

    found = os.path.join(home, '.bulkwalk')
    directory.found = found
    return found

directory.found = None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
