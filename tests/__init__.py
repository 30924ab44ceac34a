"""
Fateweaver Test Suite
=====================

Test Organization
-----------------
- tests/unit/          : Fast unit tests (no external dependencies)
- tests/unit/core/     : Configuration and logging infrastructure
- tests/unit/domain/   : Domain value objects and in-memory collaborators

Testing Philosophy
------------------
- Deterministic: seeded or scripted random sources only
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""
