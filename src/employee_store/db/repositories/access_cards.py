from __future__ import annotations

from employee_store.db.models import AccessCard
from employee_store.db.repositories.base import CrudRepo


class AccessCardRepo(CrudRepo[AccessCard, int]):
    entity = AccessCard
