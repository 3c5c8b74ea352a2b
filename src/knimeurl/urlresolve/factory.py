"""
Resolver Factory
================
Selects the concrete resolver for an execution context.

Usage:
    from knimeurl.urlresolve.factory import get_resolver

    resolver = get_resolver(context)
    resolver.resolve("knime://knime.workflow/data/input.csv").unwrap()
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Type

from knimeurl.urlresolve.base import BaseUrlResolver
from knimeurl.urlresolve.context import (
    AnalyticsPlatformLocal,
    AnalyticsPlatformTempCopy,
    ExecutionContext,
    HubExecutor,
    RemoteExecutorEditor,
    ServerExecutor,
    VirtualNodeContext,
)
from knimeurl.urlresolve.contextless import ContextlessResolver
from knimeurl.urlresolve.hub_executor import HubExecutorResolver
from knimeurl.urlresolve.local import AnalyticsPlatformLocalResolver
from knimeurl.urlresolve.remote_editor import RemoteExecutorEditorResolver
from knimeurl.urlresolve.server_executor import ServerExecutorResolver
from knimeurl.urlresolve.temp_copy import AnalyticsPlatformTempCopyResolver
from knimeurl.urlresolve.virtual import VirtualNodeContextResolver

logger = logging.getLogger(__name__)

RESOLVERS: Dict[Type, Callable[..., BaseUrlResolver]] = {
    AnalyticsPlatformLocal: AnalyticsPlatformLocalResolver,
    AnalyticsPlatformTempCopy: AnalyticsPlatformTempCopyResolver,
    HubExecutor: HubExecutorResolver,
    ServerExecutor: ServerExecutorResolver,
    RemoteExecutorEditor: RemoteExecutorEditorResolver,
}


def get_resolver(context: Optional[ExecutionContext]) -> BaseUrlResolver:
    """
    Create the resolver for an execution context.

    Args:
        context: The active execution context, None if there is none

    Returns:
        Resolver for the context; a ContextlessResolver for None

    Raises:
        TypeError: if the context is not one of the known variants
    """
    if context is None:
        logger.debug("No execution context, using the contextless resolver")
        return ContextlessResolver()

    if isinstance(context, VirtualNodeContext):
        delegate = get_resolver(context.delegate)
        logger.debug("Wrapping %s in a virtual node context", type(delegate).__name__)
        return VirtualNodeContextResolver(context, delegate)

    factory = RESOLVERS.get(type(context))
    if factory is None:
        raise TypeError(f"Unsupported execution context: {type(context).__name__}")

    resolver = factory(context)
    logger.debug("Using %s for %s", type(resolver).__name__, type(context).__name__)
    return resolver
