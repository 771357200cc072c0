# topictree/core/delivery.py
from __future__ import annotations
from contextlib import nullcontext
from typing import Any, TYPE_CHECKING

from topictree.core.logging.context import boundLogContext
from topictree.core.meta import PublishMeta

if TYPE_CHECKING:
    from topictree.core.context import TopicContext

import logging
logger = logging.getLogger(__name__)

__all__ = ["post", "publish", "publishSync", "publishAsync", "flush"]



# ----------------------------------------------
#                    Fan-out
# ----------------------------------------------

def post(context: TopicContext, payload: Any, meta: PublishMeta) -> None:
    """
    Terminal delivery step: walks from `context` up to the root, calling the
    once-subscribers then the persistent subscribers of every topic on the way.

    `meta.path` is rewritten to the topic being delivered before each call.
    Once-lists are swapped for a fresh list before their callbacks run, so
    once-subscriptions made during delivery wait for the next publish.
    """
    isolate = context.tree.settings.delivery.isolateSubscriberErrors
    node: TopicContext | None = context
    while node is not None:
        onceSnapshot = node.onceSubscribers
        if onceSnapshot:
            node.onceSubscribers = []
        for callback in onceSnapshot:
            meta.path = node.path
            _invoke(node, callback, payload, meta, isolate)

        for callback in tuple(node.persistentSubscribers):
            meta.path = node.path
            _invoke(node, callback, payload, meta, isolate)

        node = node.parent



def _invoke(node: TopicContext, callback: Any, payload: Any, meta: PublishMeta, isolate: bool) -> None:
    if not isolate:
        callback(payload, meta)
        return
    try:
        callback(payload, meta)
    except Exception:
        logger.exception(
            "Subscriber %r on topic '%s' raised while delivering publish #%d from '%s'; continuing.",
            callback, node.path, meta.contextId, meta.originalPath,
        )



# ----------------------------------------------
#                  Publish modes
# ----------------------------------------------

def _traceContext(context: TopicContext, meta: PublishMeta):
    if not context.tree.settings.delivery.tracePublishes:
        return nullcontext()
    return boundLogContext(topicPath=meta.originalPath, publishId=meta.contextId, mode=meta.mode)



def publishSync(context: TopicContext, payload: Any) -> None:
    """Runs middleware and fan-out to completion. Subscriber errors propagate."""
    meta = context.makeMeta(isAsync=False)
    with _traceContext(context, meta):
        if context.tree.settings.delivery.tracePublishes:
            logger.debug("Publishing #%d on '%s' (sync).", meta.contextId, context.path)
        context.composedDelivery(payload, meta)



def publishAsync(context: TopicContext, payload: Any) -> None:
    """
    Queues `payload` on the topic's pending batch. Only the publish that makes
    the batch non-empty schedules a flush; later ones in the same burst just
    append and ride along. A flush stranded on a closed, cancelled or replaced
    loop is scheduled again so the batch cannot get stuck.
    """
    scheduler = context.tree.scheduler
    meta = context.makeMeta(isAsync=True)
    batch = context.pendingAsyncBatch
    batch.append((payload, meta))
    if context.pendingFlush is None or not scheduler.isPending(context.pendingFlush):
        if len(batch) > 1:
            logger.warning(
                "Rescheduling stranded flush for '%s' (%d queued).", context.path, len(batch)
            )
        try:
            context.pendingFlush = scheduler.schedule(flush, context)
        except Exception:
            # Nothing will drain the batch, so do not leave it half-queued
            batch.pop()
            raise
        if context.tree.settings.delivery.tracePublishes:
            logger.debug("Scheduled flush for '%s'.", context.path)



def flush(context: TopicContext) -> int:
    """
    Delivers every queued async publish of `context` in FIFO order through
    the composed middleware as it stands now. A failing publish is reported
    to the scheduler and does not stop the rest of the batch.

    Returns the number of publishes drained.
    """
    batch, context.pendingAsyncBatch = context.pendingAsyncBatch, []
    context.pendingFlush = None
    if context.tree.settings.delivery.tracePublishes:
        logger.debug("Flushing %d publish(es) on '%s'.", len(batch), context.path)
    for payload, meta in batch:
        with _traceContext(context, meta):
            try:
                context.composedDelivery(payload, meta)
            except Exception as err:
                context.tree.scheduler.reportError(context, err)
    return len(batch)



def publish(context: TopicContext, payload: Any, isAsync: bool | None = None) -> None:
    if isAsync is None:
        isAsync = context.tree.settings.delivery.defaultAsync
    if isAsync:
        publishAsync(context, payload)
    else:
        publishSync(context, payload)
