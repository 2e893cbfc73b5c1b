"""Logging setup and hex formatting helpers."""

import logging
from typing import Union


def setup_logging(level: str) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if level.upper() != "DEBUG":
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def to_hex(value: Union[bytes, int, object]) -> str:
    """Convert a bytes or int value to hex string with 0x prefix."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, int):
        return hex(value)
    return str(value)


def from_hex(value: str) -> bytes:
    """Decode a 0x-prefixed (or bare) hex string."""
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


def shorten(value: Union[str, bytes]) -> str:
    """Abbreviate a 32-byte hex root as 0x1234..abcd for log lines."""
    if isinstance(value, (bytes, bytearray)):
        value = to_hex(value)
    if len(value) <= 12:
        return value
    return f"{value[:6]}..{value[-4:]}"
