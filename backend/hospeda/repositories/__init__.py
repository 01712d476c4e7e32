"""
Hospeda Backend — Persistence Layer
====================================

Repositories wrap an AsyncSession and one ORM model. They never check
permissions or validate input; services do that before calling them.
"""
