"""SSZ to Beacon API JSON conversion."""

from remerkleable.basic import boolean, uint
from remerkleable.bitfields import Bitlist, Bitvector
from remerkleable.complex import Container, List, Vector


def to_api_json(value):
    """Encode an SSZ value the way the Beacon API expects it in JSON bodies.

    Integers become decimal strings, byte strings and bitfields become
    0x-prefixed hex, containers become dicts keyed by field name.
    """
    if isinstance(value, boolean):
        return bool(value)
    if isinstance(value, uint):
        return str(int(value))
    if isinstance(value, (Bitlist, Bitvector)):
        return "0x" + value.encode_bytes().hex()
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple, List, Vector)):
        return [to_api_json(element) for element in value]
    if isinstance(value, Container):
        return {name: to_api_json(getattr(value, name)) for name in value.fields().keys()}
    raise TypeError(f"Type not recognized: value={value!r}, typ={type(value)}")
