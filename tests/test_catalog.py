import bulkwalk
import pytest

import tables


def test_resolve(catalog):

    assert catalog.resolve('ifDescr') == tables.IF_DESCR
    assert catalog.resolve('ifDescr.3') == tables.IF_DESCR + (3,)
    assert catalog.resolve('sysUpTime.0') == tables.SYS_UPTIME + (0,)
    assert catalog.resolve('1.3.6.1.2.1.1.5.0') == tables.SYS_NAME + (0,)
    assert catalog.resolve('.1.3.6') == (1, 3, 6)
    assert catalog.resolve((1, 3, 6)) == (1, 3, 6)

    with pytest.raises(bulkwalk.errors.NameNotFoundError):
        catalog.resolve('ifAlias')

    with pytest.raises(bulkwalk.errors.NameNotFoundError):
        catalog.resolve('ifDescr.x')


def test_instance_name(catalog):

    assert catalog.instance_name(tables.IF_DESCR + (3,)) == 'ifDescr.3'
    assert catalog.instance_name(tables.IF_DESCR) == 'ifDescr'
    assert catalog.instance_name((1, 3, 6, 1, 4, 1, 9)) == '1.3.6.1.4.1.9'


def test_format(catalog):

    assert catalog.format(tables.IF_OPER_STATUS + (1,), 1) == 'up'
    assert catalog.format(tables.IF_OPER_STATUS + (1,), 7) == '7'
    assert catalog.format(tables.IF_MTU + (1,), 1500) == '1500 bytes'
    assert catalog.format(tables.IF_DESCR + (1,), 'eth1') == 'eth1'
    assert catalog.format((1, 3, 6, 1, 4, 1, 9), 12) == '12'

    assert catalog.format(tables.SYS_UPTIME + (0,), 123) == '0:00:01.23'
    assert catalog.format(tables.SYS_UPTIME + (0,), 8640123) == '1 day, 0:00:01.23'
    assert catalog.format(tables.SYS_UPTIME + (0,), 3 * 8640000 + 360000) == '3 days, 1:00:00.00'


def test_indexes(catalog):

    indexes = catalog.indexes(tables.IF_SPEED + (4,))

    assert len(indexes) == 1
    index = indexes[0]
    assert index.name == 'ifIndex.4'
    assert index.key == 'ifIndex'
    assert index.oid == tables.IF_INDEX + (4,)
    assert index.value == 4

    assert catalog.indexes(tables.SYS_NAME + (0,)) == ()
    assert catalog.indexes(tables.IF_SPEED) == ()
    assert catalog.indexes((1, 3, 6, 1, 4, 1, 9)) == ()


def test_load(tmp_path):

    filename = tmp_path / 'catalog.json'

    with open(filename, 'wb') as writing:
        writing.write(bulkwalk.json.dumps(tables.CATALOG))

    catalog = bulkwalk.Catalog.load(str(filename))

    assert len(catalog) == len(tables.CATALOG)
    assert 'ifOperStatus' in catalog
    assert catalog.format(tables.IF_OPER_STATUS + (2,), 2) == 'down'

    with open(filename, 'wb') as writing:
        writing.write(bulkwalk.json.dumps(['not', 'a', 'mapping']))

    with pytest.raises(ValueError):
        bulkwalk.Catalog.load(str(filename))


def test_bad_entry():

    with pytest.raises(ValueError):
        bulkwalk.Catalog({'ifDescr': {'type': 'numeric'}})


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
