# backend/shopos/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/shopos.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///shopos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Storage record holding the obfuscated state tree
    STATE_STORAGE_KEY = os.environ.get("STATE_STORAGE_KEY", "superShopAppState")

    # NOT a secret: the codec only deters casual inspection of the stored blob
    STATE_OBFUSCATION_KEY = os.environ.get(
        "STATE_OBFUSCATION_KEY",
        "ThisIsASimpleKeyForObfuscationAndSecurity",
    )
