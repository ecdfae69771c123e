""" Object identifiers. An address is represented throughout bulkwalk as a
    tuple of non-negative integers; these helpers convert to and from the
    dotted text form, and compare addresses.
"""


def parse(address):
    """ Return the tuple form of *address*, which may be dotted text
        (with or without a leading dot), or any sequence of integers.
        A :class:`ValueError` is raised for anything else, including an
        empty address.
    """

    if isinstance(address, tuple) and all(type(part) is int and part >= 0 for part in address):
        parsed = address
    elif isinstance(address, str):
        text = address.strip()
        if text.startswith('.'):
            text = text[1:]

        try:
            parsed = tuple(int(part) for part in text.split('.'))
        except ValueError:
            raise ValueError('not a dotted numeric address: ' + repr(address))
    else:
        try:
            parsed = tuple(int(part) for part in address)
        except TypeError:
            raise ValueError('not an address: ' + repr(address))

    if len(parsed) == 0:
        raise ValueError('empty address')

    for part in parsed:
        if part < 0:
            raise ValueError('negative sub-identifier in address: ' + repr(address))

    return parsed


def dotted(address):
    """ Return the dotted text form of *address*.
    """

    return '.'.join(str(part) for part in address)


def is_numeric(text):
    """ Return True if *text* is a dotted numeric address.
    """

    if text.startswith('.'):
        text = text[1:]

    if text == '':
        return False

    for part in text.split('.'):
        if part.isdigit():
            pass
        else:
            return False

    return True


def startswith(address, base):
    """ Return True if *address* is *base*, or lies beneath it.
    """

    length = len(base)
    return len(address) >= length and tuple(address[:length]) == tuple(base)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
