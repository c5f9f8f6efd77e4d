"""SQLAlchemy events that keep the autocomplete index in sync with model rows."""

import logging

from sqlalchemy import event
from sqlalchemy.orm import Session, object_session

logger = logging.getLogger(__name__)

PENDING_KEY = "autocomplete_pending"


def _index_of(obj):
    return getattr(type(obj), "__autocomplete__", None)


# ============================================================
# FLUSH-TIME WRITES
# ============================================================

def _after_insert(mapper, connection, target):
    _index_of(target).store_document(target, "index")


def _after_update(mapper, connection, target):
    # fired for every dirty instance, including those without net changes
    session = object_session(target)
    if session is not None and not session.is_modified(target):
        return
    _index_of(target).store_document(target, "update")


def _after_delete(mapper, connection, target):
    _index_of(target).store_document(target, "delete")


# ============================================================
# COMMIT-TIME WRITES
# ============================================================

def _current_transaction(session):
    return session.get_nested_transaction() or session.get_transaction()


def _within(transaction, ancestor) -> bool:
    while transaction is not None:
        if transaction is ancestor:
            return True
        transaction = transaction.parent
    return False


def _collect_pending(session, flush_context):
    # new/dirty/deleted still describe the flush that just ran
    pending = session.info.setdefault(PENDING_KEY, [])
    transaction = _current_transaction(session)
    changes = (("index", session.new), ("update", session.dirty), ("delete", session.deleted))
    for action, objects in changes:
        for obj in objects:
            index = _index_of(obj)
            if index is None or not index.options["commit_callbacks"]:
                continue
            if action == "update" and not session.is_modified(obj):
                continue
            body = None if action == "delete" else index.as_indexed_json(obj)
            pending.append((transaction, index, action, index.document_id(obj), body))


def _send_pending(session):
    # Releasing a savepoint keeps its changes queued for the outer commit
    if session.in_nested_transaction():
        return
    pending = session.info.pop(PENDING_KEY, [])
    if pending:
        logger.debug(f"Sending {len(pending)} autocomplete document changes after commit")
    for _, index, action, doc_id, body in pending:
        index.send(action, doc_id, body)


def _discard_rolled_back(session, previous_transaction):
    pending = session.info.get(PENDING_KEY)
    if pending:
        session.info[PENDING_KEY] = [
            entry for entry in pending if not _within(entry[0], previous_transaction)
        ]


def _discard_uncommitted(session, transaction):
    # A root transaction ending without after_commit (close, rollback) leaves nothing to send
    if transaction.parent is None:
        session.info.pop(PENDING_KEY, None)


def _register_session_listeners() -> None:
    if event.contains(Session, "after_flush", _collect_pending):
        return
    event.listen(Session, "after_flush", _collect_pending)
    event.listen(Session, "after_commit", _send_pending)
    event.listen(Session, "after_soft_rollback", _discard_rolled_back)
    event.listen(Session, "after_transaction_end", _discard_uncommitted)


def register_listeners(model) -> None:
    """Hook a model's create/update/delete into its autocomplete index."""
    if model.__autocomplete__.options["commit_callbacks"]:
        _register_session_listeners()
        return
    for name, handler in (
        ("after_insert", _after_insert),
        ("after_update", _after_update),
        ("after_delete", _after_delete),
    ):
        if not event.contains(model, name, handler):
            event.listen(model, name, handler, propagate=True)
