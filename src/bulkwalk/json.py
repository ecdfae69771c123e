''' JSON encoding for PDU payloads on the ZeroMQ engine, catalog files, and
    target configuration files. The fastest library available is used:
    msgspec, then orjson, then the standard library.

    :data:`dumps` always returns bytes. :data:`DecodeError` is the tuple of
    exceptions :data:`loads` raises for a malformed document, whichever
    library is behind it; :data:`library` names that library.
'''

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


def _stdlib_dumps(*args, **kwargs):
    return json.dumps(*args, **kwargs).encode()


if msgspec is not None:
    library = 'msgspec'
    _encoder = msgspec.json.Encoder()
    _decoder = msgspec.json.Decoder()
    dumps = _encoder.encode
    loads = _decoder.decode
    DecodeError = (msgspec.DecodeError,)

elif orjson is not None:
    library = 'orjson'
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = (orjson.JSONDecodeError,)

else:
    library = 'json'
    dumps = _stdlib_dumps
    loads = json.loads

    # Bytes that are not UTF-8 fail before parsing starts.
    DecodeError = (json.JSONDecodeError, UnicodeDecodeError)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
