"""Profile ledger: per-user points and earnings counters."""

from __future__ import annotations

from enum import Enum

import structlog

from studyhub.errors import Conflict, NotFound, ValidationError
from studyhub.schemas import DEFAULT_ROLE, Profile
from studyhub.store.base import PROFILES, DocumentStore

logger = structlog.get_logger()


class LedgerMode(str, Enum):
    """How counter deltas reach the store.

    NAIVE reads the counter and writes ``current + delta``. Two concurrent
    credits for the same user can lose one of the updates.
    ATOMIC delegates to ``DocumentStore.increment``.
    """

    NAIVE = "naive"
    ATOMIC = "atomic"


class ProfileLedger:
    """Owns the uid -> profile mapping and applies counter deltas."""

    def __init__(self, store: DocumentStore, mode: LedgerMode | str = LedgerMode.NAIVE) -> None:
        self.store = store
        self.mode = LedgerMode(mode)

    async def get_profile(self, uid: str) -> Profile | None:
        record = await self.store.get_by_id(PROFILES, uid)
        return Profile.from_record(record) if record is not None else None

    async def ensure_profile(self, uid: str, default_name: str) -> Profile:
        """Return the profile for ``uid``, creating a zeroed one if absent."""
        existing = await self.get_profile(uid)
        if existing is not None:
            return existing

        record = {
            "name": default_name,
            "role": DEFAULT_ROLE,
            "bio": "",
            "points": 0,
            "earnings": 0,
        }
        try:
            await self.store.insert(PROFILES, record, doc_id=uid)
        except Conflict:
            # Lost a creation race with another session; theirs wins.
            profile = await self.get_profile(uid)
            if profile is None:
                raise
            return profile

        logger.info("profile_created", uid=uid, name=default_name)
        return Profile(uid=uid, **record)

    async def credit_points(self, uid: str, delta: int, *, require_profile: bool = False) -> Profile | None:
        """Add ``delta`` to the points counter.

        Returns None without writing when the profile does not exist, unless
        ``require_profile`` is set, in which case NotFound is raised.
        """
        return await self._apply(uid, "points", delta, require_profile=require_profile)

    async def credit_earnings(
        self, uid: str, amount: float, *, require_profile: bool = False
    ) -> Profile | None:
        """Add ``amount`` to the earnings counter. Same absence rule as credit_points."""
        return await self._apply(uid, "earnings", amount, require_profile=require_profile)

    async def update_details(
        self,
        uid: str,
        name: str | None = None,
        bio: str | None = None,
        role: str | None = None,
    ) -> Profile:
        """Edit the descriptive fields of a profile. Counters are not touched here."""
        fields: dict[str, str] = {}
        if name is not None:
            if not name.strip():
                msg = "Name cannot be empty"
                raise ValidationError(msg)
            fields["name"] = name.strip()
        if bio is not None:
            fields["bio"] = bio
        if role is not None:
            if not role.strip():
                msg = "Role cannot be empty"
                raise ValidationError(msg)
            fields["role"] = role.strip()

        if not fields:
            profile = await self.get_profile(uid)
            if profile is None:
                msg = "Profile not found"
                raise NotFound(msg)
            return profile

        try:
            record = await self.store.update_fields(PROFILES, uid, fields)
        except NotFound:
            msg = "Profile not found"
            raise NotFound(msg) from None
        return Profile.from_record(record)

    async def _apply(
        self,
        uid: str,
        field: str,
        delta: int | float,
        *,
        require_profile: bool,
    ) -> Profile | None:
        if self.mode is LedgerMode.ATOMIC:
            try:
                await self.store.increment(PROFILES, uid, field, delta)
            except NotFound:
                return self._missing(uid, field, require_profile)
            profile = await self.get_profile(uid)
        else:
            profile = await self.get_profile(uid)
            if profile is None:
                return self._missing(uid, field, require_profile)
            current = getattr(profile, field)
            record = await self.store.update_fields(PROFILES, uid, {field: current + delta})
            profile = Profile.from_record(record)

        logger.info("ledger_credit", uid=uid, field=field, delta=delta, mode=self.mode.value)
        return profile

    @staticmethod
    def _missing(uid: str, field: str, require_profile: bool) -> None:
        if require_profile:
            msg = f"Profile '{uid}' not found"
            raise NotFound(msg)
        logger.warning("profile_missing", uid=uid, field=field)
