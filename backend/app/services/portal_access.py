"""Client portal scope resolution.

A portal link carries a token that is either a row in
`client_portal_tokens` or, for older links, a bare property id or account
id. The scope is every `client_list` row belonging to the same account.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import ClientProperty
from app.models.portal_token import ClientPortalToken

logger = logging.getLogger(__name__)


class PortalTokenExpiredError(Exception):
    """Raised when a stored portal token is past its expiry."""


@dataclass
class PortalClientRow:
    property_id: str
    account_id: Optional[str] = None
    client_name: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class PortalScope:
    account_id: str
    account_name: str
    property_ids: list[str] = field(default_factory=list)
    rows: list[PortalClientRow] = field(default_factory=list)
    expires_at: Optional[datetime] = None


def _clean(value: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def derive_account_id(row: PortalClientRow) -> str:
    """Explicit account id, or the property id for single-property clients."""
    return row.account_id or row.property_id


def derive_account_name(row: PortalClientRow) -> str:
    return row.company or row.client_name or "Client Account"


def normalise_rows(clients: list[ClientProperty]) -> list[PortalClientRow]:
    """Trim fields and de-duplicate by property id (last one wins, first position kept)."""
    deduped: dict[str, PortalClientRow] = {}
    for client in clients:
        property_id = _clean(client.property_id)
        if not property_id:
            continue
        deduped[property_id] = PortalClientRow(
            property_id=property_id,
            account_id=_clean(client.account_id),
            client_name=_clean(client.client_name),
            company=_clean(client.company),
            address=_clean(client.address),
            notes=_clean(client.notes),
        )
    return list(deduped.values())


async def _rows_where(db: AsyncSession, column, value: str) -> list[ClientProperty]:
    result = await db.execute(
        select(ClientProperty).where(column == value).order_by(ClientProperty.property_id)
    )
    return list(result.scalars().all())


async def resolve_portal_scope(db: AsyncSession, token: str) -> Optional[PortalScope]:
    """Resolve a token that is a property id or an account id."""
    trimmed = (token or "").strip()
    if not trimmed:
        return None

    property_matches = await _rows_where(db, ClientProperty.property_id, trimmed)
    rows = normalise_rows(property_matches)
    canonical_account_id: Optional[str] = derive_account_id(rows[0]) if rows else None

    if not rows:
        rows = normalise_rows(await _rows_where(db, ClientProperty.account_id, trimmed))
        canonical_account_id = derive_account_id(rows[0]) if rows else trimmed
    elif canonical_account_id and canonical_account_id != trimmed:
        # Matched a single property; widen to the rest of its account
        account_rows = await _rows_where(db, ClientProperty.account_id, canonical_account_id)
        rows = normalise_rows(property_matches + account_rows)

    if not rows:
        return None

    account_id = canonical_account_id or derive_account_id(rows[0])
    return PortalScope(
        account_id=account_id,
        account_name=derive_account_name(rows[0]),
        property_ids=[row.property_id for row in rows],
        rows=rows,
    )


async def resolve_portal_token(
    db: AsyncSession,
    token: str,
    now: Optional[datetime] = None,
) -> Optional[PortalScope]:
    """Resolve a portal link token to the client's scope.

    Stored tokens point at an account or property; unknown tokens are tried
    as a bare property/account id.

    Raises:
        PortalTokenExpiredError: the stored token has expired
    """
    trimmed = (token or "").strip()
    if not trimmed:
        return None

    result = await db.execute(
        select(ClientPortalToken).where(ClientPortalToken.token == trimmed)
    )
    stored = result.scalar_one_or_none()

    if stored is None:
        return await resolve_portal_scope(db, trimmed)

    now = now or datetime.utcnow()
    if stored.expires_at is not None and stored.expires_at <= now:
        raise PortalTokenExpiredError(trimmed)

    target = _clean(stored.account_id) or _clean(stored.property_id)
    if not target:
        logger.warning(f"[PORTAL] Token {trimmed[:6]}… has no account or property")
        return None

    scope = await resolve_portal_scope(db, target)
    if scope:
        scope.expires_at = stored.expires_at
    return scope
