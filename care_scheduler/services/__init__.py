"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
One service class per scheduling component, each exposed as a module-level
singleton. Services call repositories for DB operations and flush; routers
own the commit.
"""
