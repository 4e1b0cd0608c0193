"""
Shared game state store.

A keyed store of JSON game records backed by the ``GameRecord`` model.
Independent actors (players, bots) synchronize through
``conditional_update``: read a record with its version, compute the new
body, and write it back only if nobody else wrote in between.
"""
import copy
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from ..conf import get_setting
from ..models import GameRecord

logger = logging.getLogger(__name__)

Updater = Callable[[Optional[Dict[str, Any]]], Optional[Dict[str, Any]]]


@dataclass
class StoredRecord:
    """A record body together with the version it was read at."""
    key: str
    data: Dict[str, Any]
    version: int


class GameStateStore:
    """
    Get/set/list/delete access to stored game records.

    Example:
        store = GameStateStore()
        store.set('bg-game:abc', {'board': {...}})

        def join(game):
            if game is None or game.get('player2'):
                return None
            game['player2'] = {'id': 'p2', 'name': 'Bob'}
            return game

        joined = store.conditional_update('bg-game:abc', join)
    """

    def get(self, key: str) -> Optional[StoredRecord]:
        """Return the record stored under ``key``, or None."""
        row = GameRecord.objects.filter(key=key).values('data', 'version').first()
        if row is None:
            return None
        return StoredRecord(key=key, data=row['data'], version=row['version'])

    def set(self, key: str, data: Dict[str, Any]) -> StoredRecord:
        """Unconditionally write a record, creating it if needed."""
        with transaction.atomic():
            record, created = GameRecord.objects.select_for_update().get_or_create(
                key=key,
                defaults={'data': data},
            )
            if not created:
                record.data = data
                record.version += 1
                record.save(update_fields=['data', 'version', 'updated_at'])
        return StoredRecord(key=key, data=record.data, version=record.version)

    def list(self, prefix: str = '') -> List[str]:
        """Return the sorted keys starting with ``prefix``."""
        return list(
            GameRecord.objects.filter(key__startswith=prefix)
            .order_by('key')
            .values_list('key', flat=True)
        )

    def delete(self, key: str) -> bool:
        """Delete a record. Returns True if something was deleted."""
        deleted, _ = GameRecord.objects.filter(key=key).delete()
        return deleted > 0

    def conditional_update(
        self,
        key: str,
        updater: Updater,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ) -> bool:
        """
        Apply ``updater`` to a record with optimistic concurrency.

        The updater receives a copy of the current body (None if the key
        does not exist) and returns the new body, or None to abort. The
        write only lands if the version is unchanged since the read;
        otherwise the whole read-update-write cycle is retried.

        Args:
            key: Record key.
            updater: Function computing the new body.
            max_attempts: Retry budget. Defaults to ``CAS_MAX_ATTEMPTS``.
            retry_delay: Seconds to wait after a conflict. Defaults to
                         ``CAS_RETRY_DELAY``.

        Returns:
            True if the write landed, False if the updater aborted or the
            retry budget was exhausted.
        """
        if max_attempts is None:
            max_attempts = get_setting('CAS_MAX_ATTEMPTS')
        if retry_delay is None:
            retry_delay = get_setting('CAS_RETRY_DELAY')

        for attempt in range(max_attempts):
            current = self.get(key)
            updated = updater(copy.deepcopy(current.data) if current else None)
            if updated is None:
                return False

            if self._write_if_unchanged(key, updated, current):
                return True

            logger.debug(f"Conflict updating {key} (attempt {attempt + 1}/{max_attempts})")
            if retry_delay:
                time.sleep(retry_delay)

        logger.warning(f"Giving up on {key} after {max_attempts} conflicting attempts")
        return False

    def _write_if_unchanged(
        self,
        key: str,
        data: Dict[str, Any],
        read: Optional[StoredRecord],
    ) -> bool:
        """Compare-and-set on the version column."""
        if read is None:
            try:
                with transaction.atomic():
                    GameRecord.objects.create(key=key, data=data)
            except IntegrityError:
                return False
            return True

        updated_rows = GameRecord.objects.filter(key=key, version=read.version).update(
            data=data,
            version=F('version') + 1,
            updated_at=timezone.now(),
        )
        return updated_rows == 1
