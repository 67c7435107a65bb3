"""Identifier generation"""
import secrets
import uuid
from datetime import datetime, timezone


def generate_anonymous_principal_id() -> str:
    """Principal id for an anonymous sign-in, e.g. 'ANON-3f9c0a1b2c4d'"""
    return f"ANON-{uuid.uuid4().hex[:12]}"


def generate_request_id() -> str:
    """Document id for a new portability request (20 hex chars)"""
    return secrets.token_hex(10)


def generate_correlation_id() -> str:
    """Trace id of the form COR-<utc yyyymmddHHMMSS>-<8 hex>"""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"COR-{stamp}-{secrets.token_hex(4)}"
