from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    """Repository interface for Subject.

    Note (DIP): services depend on this interface, never on a concrete backend.
    """

    def list_for_user(self, user_id: str) -> Sequence[Subject]:
        """Subjects owned by the user, ordered by name."""

        raise NotImplementedError

    def get_by_id(self, subject_id: str, *, user_id: str, for_update: bool = False) -> Optional[Subject]:
        """None when no row exists for this owner. ``for_update`` locks the row inside a transaction."""

        raise NotImplementedError

    def create(self, *, user_id: str, name: str, code: Optional[str], required_percentage: int) -> Subject:
        raise NotImplementedError

    def update_details(
        self,
        subject_id: str,
        *,
        name: str,
        code: Optional[str],
        required_percentage: int,
    ) -> bool:
        raise NotImplementedError

    def update_counters(self, subject_id: str, *, attended_classes: int, total_classes: int) -> bool:
        raise NotImplementedError

    def delete(self, subject_id: str) -> bool:
        raise NotImplementedError
