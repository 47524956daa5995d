"""Rotating action logger emitting tamper-evident JSON lines."""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import os
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from .paths import state_dir

LOGGER_NAME = "dusky"


def log_dir() -> Path:
    return state_dir() / "logs"


def log_file() -> Path:
    return log_dir() / "dusky.log"


def audit_log() -> Path:
    return state_dir() / "audit.jsonl"


def audit_key() -> Path:
    return state_dir() / "audit_ed25519.pem"


def get_logger(level: int = logging.INFO) -> logging.Logger:
    """Return the package logger, attaching the rotating file handler once.

    Module loggers named ``dusky.*`` propagate here. Nothing is sent to the
    console because the menus own the screen while they run.
    """

    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    log_dir().mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file(), maxBytes=1_000_000, backupCount=5, encoding="utf-8")
    formatter = logging.Formatter("%(message)s")

    logger.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _load_or_create_key() -> ed25519.Ed25519PrivateKey:
    path = audit_key()
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        data = path.read_bytes()
        return serialization.load_pem_private_key(data, password=None)
    key = ed25519.Ed25519PrivateKey.generate()
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    path.write_bytes(pem)
    os.chmod(path, 0o600)
    return key


def _last_hash() -> Optional[str]:
    path = audit_log()
    if not path.exists():
        return None
    try:
        lines = path.read_text(encoding="utf-8").strip().splitlines()
    except OSError:
        return None
    if not lines:
        return None
    try:
        payload = json.loads(lines[-1])
    except ValueError:
        return None
    return payload.get("hash")


def _write_audit_record(record: Dict[str, object]) -> None:
    key = _load_or_create_key()
    prev_hash = _last_hash()
    entry = {
        "ts": time.time(),
        "prev": prev_hash,
        "record": record,
    }
    canonical = json.dumps(entry, sort_keys=True, separators=(",", ":")).encode("utf-8")
    digest = hashlib.sha256(canonical).digest()
    signature = key.sign(digest)
    entry["hash"] = hashlib.sha256(canonical).hexdigest()
    entry["signature"] = base64.b64encode(signature).decode("ascii")
    entry["public_key"] = base64.b64encode(
        key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
    ).decode("ascii")
    with audit_log().open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(entry, sort_keys=True) + "\n")


def info(record: Dict[str, object]) -> None:
    """Write an action record to the rotating log and the signed audit trail."""

    logger = get_logger()
    logger.info(json.dumps(record))
    _write_audit_record(record)


__all__ = ["audit_log", "get_logger", "info", "log_file"]
