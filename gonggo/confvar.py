"""Reading and validating the ``key = value`` configuration file."""

from __future__ import annotations

import math
import os
import re
import struct
from dataclasses import dataclass, field
from typing import Iterable

PIDFILE = "pidfile"
LOGPATH = "logpath"
SSLCERT = "sslcert"
SSLCERTCHAIN = "sslcertchain"
PORT = "port"
THREADS = "threads"
GONGGO = "gonggo"
DBPATH = "dbpath"
RESPONDDRAINOVERDUE = "responddrainoverdue"
RESPONDDRAINPERIOD = "responddrainperiod"
RESPONDQUERYSIZE = "respondquerysize"
CLIENTTIMEOUTPERIOD = "clienttimeoutperiod"
PING = "pingms"

MANDATORY_KEYS = (
    PIDFILE,
    LOGPATH,
    PORT,
    GONGGO,
    DBPATH,
    RESPONDDRAINOVERDUE,
    RESPONDDRAINPERIOD,
    RESPONDQUERYSIZE,
    CLIENTTIMEOUTPERIOD,
    PING,
)

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1
_ULONG_MAX = 2**64 - 1
_FLT_MAX = 3.4028234663852886e38
_FLT_MIN = 1.1754943508222875e-38

_WS = r"[ \t\n\v\f\r]*"
_INT_RE = re.compile(_WS + r"([+-]?[0-9]+)")
_DEC_FLOAT_RE = re.compile(
    _WS + r"([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)
_HEX_FLOAT_RE = re.compile(
    _WS
    + r"([+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?)"
)
_SPECIAL_FLOAT_RE = re.compile(_WS + r"([+-]?(?:inf(?:inity)?|nan))", re.IGNORECASE)


class ConfigError(Exception):
    """Raised when the configuration is missing, malformed or invalid."""


def _squeeze(text: str) -> str:
    """Cut at the first ``#`` and drop every space and tab."""
    text = text.split("#", 1)[0]
    return text.replace(" ", "").replace("\t", "")


def _parse_line(line: str) -> tuple[str, str] | None:
    line = line.split("\n", 1)[0]
    if "=" not in line:
        return None
    key, _, value = line.partition("=")
    key = _squeeze(key)
    value = _squeeze(value)
    if not value:
        return None
    return key, value


@dataclass
class Config:
    """Ordered configuration entries; the first entry for a key wins."""

    entries: list[tuple[str, str]] = field(default_factory=list)

    def value(self, key: str) -> str | None:
        """Return the value of ``key`` or None when it is not set."""
        for name, value in self.entries:
            if name == key:
                return value
        return None

    def _require(self, key: str) -> str:
        text = self.value(key)
        if text is None:
            raise ConfigError(f"configuration key {key} is not set")
        return text

    def long(self, key: str) -> int:
        """Return ``key`` as a signed 64-bit integer."""
        text = self._require(key)
        match = _INT_RE.fullmatch(text)
        if match is None:
            raise ConfigError(f"configuration key {key} is not an integer: {text!r}")
        number = int(match.group(1))
        if not _LONG_MIN <= number <= _LONG_MAX:
            raise ConfigError(f"configuration key {key} is out of range: {text!r}")
        return number

    def float(self, key: str) -> float:
        """Return ``key`` as a single-precision floating point number."""
        text = self._require(key)
        special = _SPECIAL_FLOAT_RE.fullmatch(text)
        if special is not None:
            return float(special.group(1).lower().replace("infinity", "inf"))
        hex_match = _HEX_FLOAT_RE.fullmatch(text)
        dec_match = _DEC_FLOAT_RE.fullmatch(text)
        if hex_match is not None:
            number = float.fromhex(hex_match.group(1))
        elif dec_match is not None:
            number = float(dec_match.group(1))
        else:
            raise ConfigError(f"configuration key {key} is not a number: {text!r}")
        if math.isinf(number) or abs(number) > _FLT_MAX:
            raise ConfigError(f"configuration key {key} is out of range: {text!r}")
        if number != 0.0 and abs(number) < _FLT_MIN:
            raise ConfigError(f"configuration key {key} is out of range: {text!r}")
        return struct.unpack("f", struct.pack("f", number))[0]

    def uint(self, key: str) -> int:
        """Return ``key`` as an unsigned 32-bit integer, wrapping like C."""
        text = self._require(key)
        match = _INT_RE.fullmatch(text)
        if match is None:
            raise ConfigError(f"configuration key {key} is not an integer: {text!r}")
        number = int(match.group(1))
        if abs(number) > _ULONG_MAX:
            raise ConfigError(f"configuration key {key} is out of range: {text!r}")
        return (number % (_ULONG_MAX + 1)) & 0xFFFFFFFF

    def absent(self) -> str | None:
        """Return the first mandatory key that is not set, or None."""
        for key in MANDATORY_KEYS:
            if self.value(key) is None:
                return key
        return None


def parse_config(lines: Iterable[str]) -> Config:
    """Build a configuration from text lines."""
    entries = [entry for entry in map(_parse_line, lines) if entry is not None]
    return Config(entries)


def load_config(path: str | os.PathLike) -> Config:
    """Read a configuration file; raises OSError if it cannot be opened."""
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
        return parse_config(handle)


def validate_config(path: str | os.PathLike) -> Config:
    """Load a configuration file and check every mandatory setting."""
    try:
        config = load_config(path)
    except OSError as exc:
        raise ConfigError("invalid configuration file content") from exc
    if not config.entries:
        raise ConfigError("invalid configuration file content")

    missing = config.absent()
    if missing is not None:
        raise ConfigError(f"configuration file does not have key {missing}")

    positive = (
        RESPONDDRAINOVERDUE,
        RESPONDDRAINPERIOD,
        RESPONDQUERYSIZE,
        CLIENTTIMEOUTPERIOD,
    )
    for key in (*positive, PING):
        try:
            number = config.long(key)
        except ConfigError as exc:
            raise ConfigError(
                f"configuration file with key {key} has invalid number"
            ) from exc
        if key == PING:
            if number < 0:
                raise ConfigError(
                    f"configuration file with key {key} value must be >= 0"
                )
        elif number <= 0:
            raise ConfigError(f"configuration file with key {key} value must be > 0")

    return config