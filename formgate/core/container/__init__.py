"""Dependency Injection Container Module.

Usage:
------
    from formgate.core.config import settings
    from formgate.core.container import create_container

    container = create_container(
        settings,
        membership_provider=my_membership_provider,
        resource_store=my_form_store,
        visitor_resolver=my_session,
    )
    decision = await container.access_service.decide_for_resource(form_id)

There is no global container: build one per process or request context
and pass it explicitly.

Module structure:
-----------------
    container/
    ├── __init__.py      # This file - exports public API
    ├── container.py     # Container dataclass (serves)
    └── factory.py       # create_container() (builds)
"""

from formgate.core.container.container import Container
from formgate.core.container.factory import create_container

__all__ = ["Container", "create_container"]
