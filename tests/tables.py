""" Canned data for the unit tests: a small catalog, an agent populated
    with an interface table, and an engine that answers from a script.
"""

import threading

import bulkwalk


SYS_UPTIME = (1, 3, 6, 1, 2, 1, 1, 3)
SYS_NAME = (1, 3, 6, 1, 2, 1, 1, 5)
IF_ENTRY = (1, 3, 6, 1, 2, 1, 2, 2, 1)
IF_INDEX = IF_ENTRY + (1,)
IF_DESCR = IF_ENTRY + (2,)
IF_TYPE = IF_ENTRY + (3,)
IF_MTU = IF_ENTRY + (4,)
IF_SPEED = IF_ENTRY + (5,)
IF_OPER_STATUS = IF_ENTRY + (8,)
IP_FORWARDING = (1, 3, 6, 1, 2, 1, 4, 1)

COLUMNS = (IF_INDEX, IF_DESCR, IF_TYPE, IF_MTU, IF_SPEED, IF_OPER_STATUS)

CATALOG = {
    'sysUpTime': {'oid': '1.3.6.1.2.1.1.3', 'type': 'timeticks'},
    'sysName': '1.3.6.1.2.1.1.5',
    'ifIndex': {'oid': '1.3.6.1.2.1.2.2.1.1', 'indexes': ['ifIndex']},
    'ifDescr': {'oid': '1.3.6.1.2.1.2.2.1.2', 'indexes': ['ifIndex']},
    'ifType': {'oid': '1.3.6.1.2.1.2.2.1.3', 'indexes': ['ifIndex']},
    'ifMtu': {'oid': '1.3.6.1.2.1.2.2.1.4', 'type': 'numeric', 'format': '%d bytes', 'indexes': ['ifIndex']},
    'ifSpeed': {'oid': '1.3.6.1.2.1.2.2.1.5', 'indexes': ['ifIndex']},
    'ifOperStatus': {'oid': '1.3.6.1.2.1.2.2.1.8', 'type': 'enumerated',
                     'values': {'1': 'up', '2': 'down'}, 'indexes': ['ifIndex']},
    'ipForwarding': '1.3.6.1.2.1.4.1',
}

UPTIME = 8640123


def value(column, row):

    if column == IF_INDEX:
        return row
    if column == IF_DESCR:
        return 'eth%d' % (row,)
    if column == IF_TYPE:
        return 6
    if column == IF_MTU:
        return 1500
    if column == IF_SPEED:
        return 1000 * row
    if column == IF_OPER_STATUS:
        return 1 if row % 2 else 2

    raise ValueError('unknown column: ' + repr(column))


def interface_entries(rows, columns=COLUMNS, trailer=True):
    """ Return agent entries for an interface table of *rows* rows. With
        *trailer*, an object follows the table, so walking off the end of
        the table lands on it rather than on the end of the MIB view.
    """

    entries = list()
    entries.append((SYS_UPTIME + (0,), UPTIME, 'timeticks'))
    entries.append((SYS_NAME + (0,), 'agent.example.com'))

    for column in columns:
        for row in range(1, rows + 1):
            entries.append((column + (row,), value(column, row)))

    if trailer:
        entries.append((IP_FORWARDING + (0,), 1))

    return entries


def interface_agent(rows, columns=COLUMNS, trailer=True, max_response=None):
    return bulkwalk.Agent(interface_entries(rows, columns, trailer), max_response=max_response)


class ScriptedEngine(bulkwalk.transport.Engine):
    """ Answers each request, synchronously, with the next list of bindings
        from *script*; requests are kept in :attr:`requests`.
    """

    def __init__(self, script):
        self.script = list(script)
        self.requests = list()
        self.lock = threading.Lock()

    def send(self, pdu, destination, callback):

        with self.lock:
            self.requests.append(pdu)
            varbinds = self.script.pop(0)

        varbinds = [bulkwalk.protocol.Varbind(*entry) for entry in varbinds]
        callback(pdu.response(varbinds), None)
        return pdu.id

    def cancel(self, handle):
        pass

    def close(self):
        pass


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
