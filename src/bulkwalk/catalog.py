""" The catalog maps object names to addresses and back, formats values
    for display, and knows which columns of a table identify its rows.

A catalog is loaded from a JSON mapping of object name to entry. An entry
is either the dotted address alone, or a dictionary with these keys:

``oid``
    The dotted address; required.
``type``
    Optional display type: ``enumerated`` (with a ``values`` mapping of
    integer value to text), ``numeric`` (with a printf-style ``format``),
    or ``timeticks``.
``indexes``
    For a table column, the names of the objects indexing the table, one
    address sub-identifier per index.
"""

import threading

from . import errors
from . import json
from .protocol import fields
from .protocol import oid as oidmodule
from .protocol import Varbind


class Catalog:
    """ An in-memory catalog, optionally populated from *entries*, a
        dictionary in the form described above.
    """

    def __init__(self, entries=None):

        self._by_name = dict()
        self._by_oid = dict()
        self._lock = threading.Lock()

        if entries:
            self.update(entries)


    def __contains__(self, name):
        return name in self._by_name


    def __len__(self):
        return len(self._by_name)


    def update(self, entries):
        """ Add or replace the catalog entries in *entries*.
        """

        parsed = dict()

        for name, entry in entries.items():
            if isinstance(entry, str):
                entry = {'oid': entry}
            else:
                entry = dict(entry)

            try:
                address = entry['oid']
            except KeyError:
                raise ValueError('catalog entry %r has no oid' % (name,))

            entry['oid'] = oidmodule.parse(address)
            entry['name'] = name
            parsed[name] = entry

        with self._lock:
            for name, entry in parsed.items():
                self._by_name[name] = entry
                self._by_oid[entry['oid']] = entry


    def lookup(self, address):
        """ Return a tuple (entry, suffix) for the longest catalog address
            that *address* starts with, or (None, *address*) if there is
            none.
        """

        address = oidmodule.parse(address)
        by_oid = self._by_oid

        for length in range(len(address), 0, -1):
            try:
                entry = by_oid[address[:length]]
            except KeyError:
                continue

            return entry, address[length:]

        return None, address


    def resolve(self, name):
        """ Return the address for *name*, which is either dotted numeric
            text, or an object name followed by an optional dotted numeric
            instance suffix, as in ``ifDescr.3``. Unknown names raise
            :class:`bulkwalk.errors.NameNotFoundError`.
        """

        if isinstance(name, str) == False:
            return oidmodule.parse(name)

        if oidmodule.is_numeric(name):
            return oidmodule.parse(name)

        base, dot, suffix = name.partition('.')

        try:
            entry = self._by_name[base]
        except KeyError:
            raise errors.NameNotFoundError('name not found: ' + repr(name))

        if suffix:
            try:
                suffix = oidmodule.parse(suffix)
            except ValueError:
                raise errors.NameNotFoundError('invalid instance suffix: ' + repr(name))
        else:
            suffix = ()

        return entry['oid'] + suffix


    def instance_name(self, address):
        """ Return the name for *address*: the name of the longest known
            prefix, followed by the remaining sub-identifiers, or the dotted
            address if no prefix is known.
        """

        entry, suffix = self.lookup(address)

        if entry is None:
            return oidmodule.dotted(suffix)

        if suffix:
            return entry['name'] + '.' + oidmodule.dotted(suffix)

        return entry['name']


    def format(self, address, value):
        """ Translate *value* for display according to the catalog entry
            for *address*. For example, if the object is enumerated this
            provides one-way mapping from integer values to representative
            strings; for example, 1 to 'up', 2 to 'down', etc.
        """

        if value is None:
            return ''

        entry, suffix = self.lookup(address)

        if entry is None:
            return str(value)

        try:
            type = entry['type']
        except KeyError:
            return str(value)

        if type == 'enumerated':
            return self.format_enumerated(entry, value)

        if type == 'numeric':
            try:
                entry['format']
            except KeyError:
                return str(value)
            else:
                return self.format_numeric(entry, value)

        if type == 'timeticks':
            return self.format_timeticks(entry, value)

        return str(value)


    def format_enumerated(self, entry, value):

        values = entry.get('values', {})

        # JSON object keys are always strings.
        try:
            return values[str(value)]
        except KeyError:
            return str(value)


    def format_numeric(self, entry, value):

        format = entry['format']
        value = float(value)

        if 'd' in format:
            value = int(value)

        formatted = format % (value)

        return formatted


    def format_timeticks(self, entry, value):

        hundredths = int(value)
        seconds, hundredths = divmod(hundredths, 100)
        minutes, seconds = divmod(seconds, 60)
        hours, minutes = divmod(minutes, 60)
        days, hours = divmod(hours, 24)

        clock = '%d:%02d:%02d.%02d' % (hours, minutes, seconds, hundredths)

        if days == 1:
            return '1 day, ' + clock
        if days:
            return '%d days, %s' % (days, clock)

        return clock


    def indexes(self, address):
        """ Return the index bindings for the table column instance at
            *address*: one binding per name in the column's ``indexes``
            list, whose value is the corresponding sub-identifier of the
            instance suffix. An empty tuple is returned for anything that
            is not a known table column instance.
        """

        entry, suffix = self.lookup(address)

        if entry is None:
            return ()

        try:
            names = entry['indexes']
        except KeyError:
            return ()

        if len(suffix) < len(names):
            return ()

        instance = oidmodule.dotted(suffix)
        indexes = list()

        for position, name in enumerate(names):
            try:
                index = self._by_name[name]
            except KeyError:
                index_oid = entry['oid'] + suffix
            else:
                index_oid = index['oid'] + suffix

            varbind = Varbind(index_oid, suffix[position], fields.INTEGER,
                              name=name + '.' + instance, catalog=self)
            indexes.append(varbind)

        return tuple(indexes)


    @classmethod
    def load(cls, filename):
        """ Return a new :class:`Catalog` populated from the JSON file at
            *filename*.
        """

        with open(filename, 'rb') as loading:
            entries = json.loads(loading.read())

        if isinstance(entries, dict):
            pass
        else:
            raise ValueError('expected a JSON object in ' + repr(filename))

        return cls(entries)


# end of class Catalog


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
