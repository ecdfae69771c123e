""" Variable bindings, and ordered collections of them.
"""

from . import fields
from . import oid as oidmodule


class Varbind:
    """ A :class:`Varbind` binds a *value* to an address. The *syntax* names
        the type of the value as the agent reported it; for the exception
        syntaxes (``noSuchObject``, ``noSuchInstance``, ``endOfMibView``)
        the value is None.

        The *name* is the instance name the catalog assigned to the address,
        for example ``ifDescr.3``; without a catalog it is the dotted
        numeric address. The *key* is the instance name up to its first dot,
        which is how a :class:`VarbindCollection` indexes its members.

        :ivar oid: The address as a tuple of integers.
        :ivar catalog: The :class:`bulkwalk.catalog.Catalog` used for
            display formatting and index extraction, if any.
    """

    def __init__(self, oid, value=None, syntax=None, name=None, catalog=None):

        self.oid = oidmodule.parse(oid)
        self.value = value

        if syntax is None:
            syntax = _guess_syntax(value)

        self.syntax = syntax
        self.catalog = catalog

        if name is None:
            if catalog is None:
                name = oidmodule.dotted(self.oid)
            else:
                name = catalog.instance_name(self.oid)

        self.name = name


    def __eq__(self, other):
        if isinstance(other, Varbind):
            return self.oid == other.oid and self.value == other.value and self.syntax == other.syntax
        return NotImplemented


    def __repr__(self):
        return 'Varbind(%s, %r, %s)' % (self.name, self.value, self.syntax)


    def __str__(self):
        return self.name + ' = ' + self.formatted


    @property
    def exception(self):
        """ True if this binding carries one of the exception values rather
            than a real value.
        """

        return self.syntax in fields.EXCEPTIONS


    @property
    def formatted(self):
        """ The value rendered for display, using the catalog if one is
            attached.
        """

        if self.exception:
            return self.syntax

        if self.catalog is None:
            return str(self.value)

        return self.catalog.format(self.oid, self.value)


    @property
    def key(self):

        name = self.name
        if oidmodule.is_numeric(name):
            return name

        return name.split('.', 1)[0]


    def as_int(self):
        return int(self.value)


    def as_str(self):
        return str(self.value)


    def bind(self, catalog):
        """ Return a copy of this binding named and formatted through
            *catalog*.
        """

        return Varbind(self.oid, self.value, self.syntax, catalog=catalog)


    def indexes(self):
        """ Return the index bindings for this table column instance, as
            described by the catalog. Without a catalog, or for an address
            the catalog does not describe as a table column, an empty
            tuple is returned.
        """

        if self.catalog is None:
            return ()

        return self.catalog.indexes(self.oid)


    def to_list(self):

        value = self.value
        if self.syntax == fields.OBJECT_ID and value is not None:
            value = oidmodule.dotted(value)

        return [oidmodule.dotted(self.oid), value, self.syntax]


    @classmethod
    def from_list(cls, parts):

        address, value, syntax = parts
        if syntax == fields.OBJECT_ID and value is not None:
            value = oidmodule.parse(value)

        return cls(address, value, syntax)


# end of class Varbind



class VarbindCollection:
    """ An ordered collection of :class:`Varbind` instances, also indexed by
        each member's key. A table row returned by a walker is a
        :class:`VarbindCollection` whose index bindings (the values that
        identify the row) are available through :func:`indexes`, and also
        by key, but are not part of the ordered sequence.
    """

    def __init__(self, varbinds=()):

        self._list = list()
        self._map = dict()
        self._indexes = list()

        for varbind in varbinds:
            self.add(varbind)


    def __contains__(self, key):
        return key in self._map


    def __getitem__(self, key):

        if isinstance(key, (int, slice)):
            return self._list[key]

        return self._map[key]


    def __iter__(self):
        return iter(self._list)


    def __len__(self):
        return len(self._list)


    def __repr__(self):
        return 'VarbindCollection(' + repr(self._list) + ')'


    def add(self, varbind, key=None):

        if key is None:
            key = varbind.key

        self._list.append(varbind)
        self._map[key] = varbind


    def add_index(self, varbind, key=None):

        if key is None:
            key = varbind.key

        self._indexes.append(varbind)
        self._map[key] = varbind


    def as_list(self):
        return list(self._list)


    def as_map(self):
        return dict(self._map)


    def get(self, key, default=None):
        return self._map.get(key, default)


    def indexes(self):
        return list(self._indexes)


    def keys(self):
        return self._map.keys()


    def next_identifiers(self, *keys):
        """ Return the addresses of the members named by *keys*, or of
            every member in order if no keys are given. These are the
            addresses a GETNEXT or GETBULK request would use to continue
            from this collection.
        """

        if keys:
            return [self._map[key].oid for key in keys]

        return [varbind.oid for varbind in self._list]


# end of class VarbindCollection



def _guess_syntax(value):

    if value is None:
        return fields.NULL
    if isinstance(value, bool):
        return fields.INTEGER
    if isinstance(value, int):
        return fields.INTEGER
    if isinstance(value, tuple):
        return fields.OBJECT_ID

    return fields.STRING


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
