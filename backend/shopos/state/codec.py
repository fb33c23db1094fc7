# Overview: Reversible obfuscation of the serialized state tree.

"""
ObfuscationCodec

The stored blob is `base64(xor(json, key))` with the key repeated over the
JSON text. This is NOT encryption: anyone holding the source can reverse it.
It exists only so the persisted record is not plain readable JSON, and it is
kept byte-compatible with blobs written by earlier versions of the app.

JSON is written ASCII-escaped and compact, so every XORed character fits in
a single byte and legacy readers (JSON.parse, atob) accept it unchanged.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any


logger = logging.getLogger(__name__)

DEFAULT_OBFUSCATION_KEY = "ThisIsASimpleKeyForObfuscationAndSecurity"


class ObfuscationCodec:
    def __init__(self, key: str = DEFAULT_OBFUSCATION_KEY):
        if not key:
            raise ValueError("Obfuscation key must not be empty")
        self.key = key

    def _xor(self, text: str) -> str:
        key = self.key
        key_len = len(key)
        return "".join(chr(ord(ch) ^ ord(key[i % key_len])) for i, ch in enumerate(text))

    def encode(self, state: Any) -> str:
        """Serialize and obfuscate. Returns "" if the value cannot be serialized."""
        try:
            json_text = json.dumps(state, separators=(",", ":"))
        except (TypeError, ValueError):
            logger.exception("Failed to encode state")
            return ""
        processed = self._xor(json_text)
        return base64.b64encode(processed.encode("latin-1")).decode("ascii")

    def decode(self, encoded: str | None) -> Any | None:
        """
        Reverse `encode`.

        Falls back to plain JSON for unobfuscated legacy records. Returns None
        when neither form parses.
        """
        if not encoded:
            return None
        try:
            raw = base64.b64decode(encoded, validate=True).decode("latin-1")
            return json.loads(self._xor(raw))
        except (binascii.Error, ValueError) as e:
            try:
                return json.loads(encoded)
            except ValueError:
                logger.error("Failed to decode state, possibly corrupt data: %s", e)
                return None
