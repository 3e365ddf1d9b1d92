from __future__ import annotations

from employee_store.db.models import EmailGroup
from employee_store.db.repositories.base import CrudRepo


class EmailGroupRepo(CrudRepo[EmailGroup, int]):
    entity = EmailGroup
