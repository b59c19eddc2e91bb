"""
Budget Task Reconciler - three-way diff of an incoming task set.

    incoming item with empty uuid       → create
    incoming item whose uuid is stored  → update
    stored uuid absent from incoming    → delete

The delete set is computed against the stored set as it was before any update
is applied. An incoming uuid that is not stored is rejected rather than
silently turned into a create.
"""

from billing.core.exceptions import NotFoundError, ValidationError
from billing.core.records import Reconciliation


def _item_uuid(item):
    if isinstance(item, dict):
        value = item.get("uuid")
    else:
        value = getattr(item, "uuid", None)
    return value or None


def reconcile_budget_tasks(existing, incoming, *, resource: str = "Task") -> Reconciliation:
    """Diff ``incoming`` (dicts or records) against ``existing`` (objects with ``uuid``).

    Returns:
        Reconciliation with ``to_create`` (incoming items), ``to_update``
        (``(existing, incoming)`` pairs) and ``to_delete`` (existing items),
        each in input order.

    Raises:
        NotFoundError: an incoming item names a uuid not in ``existing``.
        ValidationError: the same uuid appears twice in ``incoming``.
    """
    by_uuid = {_item_uuid(obj): obj for obj in existing}

    to_create = []
    to_update = []
    kept = set()
    for item in incoming:
        uuid = _item_uuid(item)
        if uuid is None:
            to_create.append(item)
            continue
        if uuid in kept:
            raise ValidationError(f"{resource} {uuid} appears more than once",
                                  details={"uuid": uuid})
        if uuid not in by_uuid:
            raise NotFoundError(resource, uuid)
        to_update.append((by_uuid[uuid], item))
        kept.add(uuid)

    to_delete = [obj for obj in existing if _item_uuid(obj) not in kept]
    return Reconciliation(to_create=to_create, to_update=to_update, to_delete=to_delete)
