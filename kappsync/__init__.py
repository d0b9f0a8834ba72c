"""
Kappsync - Declarative kapp/kbld Reconciliation

Reconciles declarative application state by delegating the real work
to the Carvel command-line tools (kapp for deploys, kbld for templates)
and interpreting their exit codes as drift information.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- api: Typed resource records and HTTP payloads
- args: Command-line argument building
- executor: External process execution
- classifier: Exit status interpretation
- reconciler: Resource lifecycle (create/read/update/delete/diff)
- storage: Persisted resource attributes
"""

__version__ = "1.0.0"
